"""
Error Types
Failure classes surfaced by the clients, the generator and the persistence gateway
"""
from typing import Optional


class TestGenError(Exception):
    """Base class for all user-reportable failures"""
    __test__ = False


class ConfigurationMissing(TestGenError):
    """A required credential or input field is absent"""
    pass


class RemoteRequestFailed(TestGenError):
    """A remote service (proxy, Jira or Gemini) answered with a non-success status or could not be reached"""

    def __init__(self, message: str, status_code: Optional[int] = None, body: Optional[str] = None):
        super().__init__(message)
        self.status_code = status_code
        self.body = body


class ResponseShapeUnexpected(TestGenError):
    """The LLM reply lacks the expected structure or its JSON could not be parsed"""
    pass


class PersistenceFailed(TestGenError):
    """Reading from or writing to the document store failed"""
    pass
