"""
Proxy Models
Request and response models for the Jira and Gemini proxy endpoints
"""
from pydantic import BaseModel, Field, ConfigDict
from typing import Optional, Dict, Any


class JiraProxyRequest(BaseModel):
    """Request model for fetching a Jira issue through the proxy"""
    model_config = ConfigDict(populate_by_name=True, coerce_numbers_to_str=True)

    jira_url: Optional[str] = Field(None, alias="jiraUrl", description="Jira site URL", examples=["https://your-domain.atlassian.net"])
    jira_username: Optional[str] = Field(None, alias="jiraUsername", description="Jira account email")
    jira_api_token: Optional[str] = Field(None, alias="jiraApiToken", description="Jira API token")
    issue_id: Optional[str] = Field(None, alias="issueId", description="Issue key or ID", examples=["PROJ-123"])

    def is_complete(self) -> bool:
        return all(value and value.strip() for value in (self.jira_url, self.jira_username, self.jira_api_token, self.issue_id))


class GeminiProxyRequest(BaseModel):
    """Request model for a single-turn Gemini generation through the proxy"""
    model_config = ConfigDict(populate_by_name=True, coerce_numbers_to_str=True)

    prompt: Optional[str] = Field(None, description="Prompt text sent as the single user turn")
    generation_config: Optional[Dict[str, Any]] = Field(
        None, alias="generationConfig", description="Gemini generationConfig forwarded as-is"
    )
    response_schema: Optional[Dict[str, Any]] = Field(
        None, alias="responseSchema",
        description="JSON response schema; merged into generationConfig with responseMimeType application/json"
    )


class ProxyErrorResponse(BaseModel):
    """Error body returned by both proxy endpoints"""
    error: str = Field(..., description="Human-readable error message")
