import requests
from typing import Dict, Any, Optional
import logging
from urllib.parse import quote

from .errors import ConfigurationMissing, RemoteRequestFailed

logger = logging.getLogger(__name__)


class JiraClient:
    """Jira REST API client used by the proxy to fetch issues with caller-supplied credentials"""

    def __init__(self, server_url: str, username: str, api_token: str, timeout: float = 30,
                 session: Optional[requests.Session] = None):
        if not server_url or not username or not api_token:
            raise ConfigurationMissing("Missing Jira configuration.")

        self.server_url = server_url.rstrip('/')
        self.timeout = timeout

        logger.debug(f"JiraClient initialized for {self.server_url} as {username}")
        self.session = session or requests.Session()
        self.session.auth = (username, api_token)
        self.session.headers.update({
            'Accept': 'application/json'
        })

    def get_issue_url(self, issue_key: str) -> str:
        """Build the REST v3 issue URL, keeping any path prefix of the server URL"""
        return f"{self.server_url}/rest/api/3/issue/{quote(issue_key.strip(), safe='')}"

    def get_issue(self, issue_key: str) -> Dict[str, Any]:
        """
        Get the full issue JSON for a ticket.

        Raises:
            ConfigurationMissing: If no issue key is given
            RemoteRequestFailed: If Jira answers with a non-success status
            requests.exceptions.RequestException: If Jira cannot be reached
        """
        if not issue_key or not issue_key.strip():
            raise ConfigurationMissing("Missing Jira Issue ID.")

        url = self.get_issue_url(issue_key)
        logger.info(f"Fetching Jira issue {issue_key}")

        response = self.session.get(url, timeout=self.timeout)
        if not response.ok:
            logger.warning(f"Jira returned {response.status_code} for issue {issue_key}")
            raise RemoteRequestFailed(
                f"Jira API Error: {response.status_code} - {response.text}",
                status_code=response.status_code,
                body=response.text
            )

        return response.json()
