"""
Proxy Client
HTTP client for the outbound proxy's /api/jira and /api/gemini endpoints
"""
import logging
from typing import Any, Dict, Optional

import requests

from .errors import RemoteRequestFailed

logger = logging.getLogger(__name__)


class ProxyClient:
    """Client for the outbound proxy"""

    def __init__(self, base_url: str = "http://localhost:3001", timeout: float = 120,
                 session: Optional[requests.Session] = None):
        self.base_url = base_url.rstrip('/')
        self.timeout = timeout
        self.session = session or requests.Session()

    def _post(self, path: str, payload: Dict[str, Any], service: str) -> Any:
        url = f"{self.base_url}{path}"
        try:
            response = self.session.post(url, json=payload, timeout=self.timeout)
        except requests.exceptions.RequestException as e:
            logger.error(f"Proxy request to {path} failed: {e}")
            raise RemoteRequestFailed(f"Could not reach proxy at {self.base_url}: {e}") from e

        if not response.ok:
            # The proxy sends {"error": "..."} on failure
            try:
                message = response.json().get('error')
            except (ValueError, AttributeError):
                message = None
            message = message or f"{service} API Error: {response.status_code}"
            logger.warning(f"Proxy {path} returned {response.status_code}: {message}")
            raise RemoteRequestFailed(message, status_code=response.status_code, body=response.text)

        try:
            return response.json()
        except ValueError as e:
            raise RemoteRequestFailed(f"Proxy returned a non-JSON response from {path}",
                                      status_code=response.status_code, body=response.text) from e

    def fetch_jira_issue(self, jira_url: str, jira_username: str, jira_api_token: str, issue_id: str) -> Dict[str, Any]:
        """Fetch a Jira issue through the proxy"""
        payload = {
            "jiraUrl": jira_url,
            "jiraUsername": jira_username,
            "jiraApiToken": jira_api_token,
            "issueId": issue_id
        }
        return self._post("/api/jira", payload, "Jira")

    def generate(self, prompt: str, generation_config: Optional[Dict[str, Any]] = None,
                 response_schema: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """Send a generation request through the proxy and return the raw Gemini response"""
        payload: Dict[str, Any] = {"prompt": prompt}
        if generation_config is not None:
            payload["generationConfig"] = generation_config
        if response_schema is not None:
            payload["responseSchema"] = response_schema
        return self._post("/api/gemini", payload, "Gemini")

    def health_check(self) -> Dict[str, Any]:
        """Fetch the proxy's /health report"""
        try:
            response = self.session.get(f"{self.base_url}/health", timeout=self.timeout)
            response.raise_for_status()
            return response.json()
        except (requests.exceptions.RequestException, ValueError) as e:
            logger.error(f"Proxy health check failed: {e}")
            raise RemoteRequestFailed(f"Could not reach proxy at {self.base_url}: {e}") from e
