"""
Issue Client
Fetches Jira issues through the proxy and renders them as LLM prompt context
"""
import logging
from datetime import datetime
from typing import Any, Dict, Optional

from .adf import flatten_adf
from .config import DEFAULT_ACCEPTANCE_CRITERIA_FIELD
from .errors import ConfigurationMissing
from .models import JiraSettings
from .proxy_client import ProxyClient

logger = logging.getLogger(__name__)


def _name(value: Any, key: str = 'name') -> Optional[str]:
    """Read a display attribute from a Jira object field such as status or assignee"""
    if isinstance(value, dict):
        return value.get(key)
    return None


def _format_timestamp(value: Any) -> str:
    """Render a Jira ISO-8601 timestamp as a local readable datetime"""
    if not value:
        return 'N/A'
    text = str(value)
    # Jira sends offsets without a colon (e.g. +0000)
    candidate = text
    if len(candidate) > 5 and candidate[-5] in '+-' and candidate[-4:].isdigit():
        candidate = f"{candidate[:-2]}:{candidate[-2:]}"
    try:
        parsed = datetime.fromisoformat(candidate.replace('Z', '+00:00'))
    except ValueError:
        return text
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone()
    return parsed.strftime('%Y-%m-%d %H:%M:%S')


def format_issue_for_llm(issue: Optional[Dict[str, Any]],
                         acceptance_criteria_field: str = DEFAULT_ACCEPTANCE_CRITERIA_FIELD) -> str:
    """Format a Jira issue as the plain-text context block used in every generation prompt"""
    if not issue:
        return ''

    fields = issue.get('fields') or {}
    lines = ["Jira Issue Details:"]
    lines.append(f"Issue Key: {issue.get('key', 'N/A')}")
    lines.append(f"Summary: {fields.get('summary') or 'N/A'}")

    description = fields.get('description')
    lines.append(f"Description: {flatten_adf(description) if description else 'N/A'}")

    acceptance_criteria = fields.get(acceptance_criteria_field)
    if acceptance_criteria:
        lines.append(f"Acceptance Criteria:\n{flatten_adf(acceptance_criteria)}")
    else:
        lines.append("Acceptance Criteria: N/A")

    lines.append(f"Status: {_name(fields.get('status')) or 'N/A'}")
    lines.append(f"Priority: {_name(fields.get('priority')) or 'N/A'}")
    lines.append(f"Assignee: {_name(fields.get('assignee'), 'displayName') or 'Unassigned'}")
    lines.append(f"Reporter: {_name(fields.get('reporter'), 'displayName') or 'N/A'}")
    lines.append(f"Created: {_format_timestamp(fields.get('created'))}")
    lines.append(f"Updated: {_format_timestamp(fields.get('updated'))}")

    components = [c.get('name') for c in fields.get('components') or [] if isinstance(c, dict) and c.get('name')]
    if components:
        lines.append(f"Components: {', '.join(components)}")

    labels = [str(label) for label in fields.get('labels') or []]
    if labels:
        lines.append(f"Labels: {', '.join(labels)}")

    comments = (fields.get('comment') or {}).get('comments') or []
    if comments:
        lines.append("Comments:")
        for comment in comments:
            if not isinstance(comment, dict):
                continue
            author = _name(comment.get('author'), 'displayName') or 'Unknown'
            lines.append(f"  - {author}: {flatten_adf(comment.get('body'))}")

    return '\n'.join(lines) + '\n'


class IssueClient:
    """Retrieves Jira issues via the proxy"""

    def __init__(self, proxy_client: ProxyClient,
                 acceptance_criteria_field: str = DEFAULT_ACCEPTANCE_CRITERIA_FIELD):
        self.proxy_client = proxy_client
        self.acceptance_criteria_field = acceptance_criteria_field

    def fetch_issue(self, settings: JiraSettings, issue_id: str) -> Dict[str, Any]:
        """
        Fetch a Jira issue.

        Raises:
            ConfigurationMissing: If a Jira setting or the issue ID is missing
            RemoteRequestFailed: If the proxy or Jira reports a failure
        """
        if not settings.is_complete():
            raise ConfigurationMissing("Please provide Jira URL, Username, and API Token.")
        if not issue_id or not issue_id.strip():
            raise ConfigurationMissing("Please enter a Jira Issue ID.")

        issue_id = issue_id.strip()
        logger.info(f"Fetching Jira issue {issue_id} via proxy")
        return self.proxy_client.fetch_jira_issue(
            settings.jira_url, settings.jira_username, settings.jira_api_token, issue_id
        )

    def format_for_llm(self, issue: Dict[str, Any]) -> str:
        return format_issue_for_llm(issue, self.acceptance_criteria_field)
