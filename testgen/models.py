from typing import Dict, Any, Optional, List, Union
from pydantic import BaseModel, Field, ConfigDict

EDITABLE_TEST_CASE_FIELDS = ('title', 'type', 'steps')


class TestCase(BaseModel):
    """A generated, user-editable test case"""
    __test__ = False

    title: str
    type: str
    steps: List[str]

    def with_edit(self, field: str, value: Union[str, List[str]]) -> "TestCase":
        """Return a copy with one cell changed; steps accept a list or newline-separated text"""
        if field not in EDITABLE_TEST_CASE_FIELDS:
            raise ValueError(f"Unknown test case field: {field}")

        if field == 'steps':
            if isinstance(value, str):
                value = value.split('\n')
            value = [str(step) for step in value]
        else:
            value = str(value)

        return self.model_copy(update={field: value})


class JiraSettings(BaseModel):
    """Per-user Jira connection settings"""
    model_config = ConfigDict(populate_by_name=True)

    jira_url: str = Field('', alias='jiraUrl')
    jira_username: str = Field('', alias='jiraUsername')
    jira_api_token: str = Field('', alias='jiraApiToken')
    last_updated: Optional[str] = Field(None, alias='lastUpdated')

    def is_complete(self) -> bool:
        return bool(self.jira_url and self.jira_username and self.jira_api_token)

    def to_document(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)


class SavedTestCaseSet(BaseModel):
    """Test cases saved for one issue"""
    model_config = ConfigDict(populate_by_name=True)

    test_cases: List[TestCase] = Field(default_factory=list, alias='testCases')
    saved_at: Optional[str] = Field(None, alias='savedAt')
    issue_key: Optional[str] = Field(None, alias='issueKey')
    summary: Optional[str] = None

    def to_document(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True)
