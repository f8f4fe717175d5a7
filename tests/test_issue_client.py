import pytest
from unittest.mock import Mock
from testgen.issue_client import IssueClient, format_issue_for_llm
from testgen.errors import ConfigurationMissing, RemoteRequestFailed
from testgen.models import JiraSettings


def adf(text):
    return {'type': 'doc', 'version': 1, 'content': [
        {'type': 'paragraph', 'content': [{'type': 'text', 'text': text}]}
    ]}


@pytest.fixture
def issue():
    return {
        'key': 'PROJ-42',
        'fields': {
            'summary': 'Password reset',
            'description': adf('Users can reset their password by email.'),
            'customfield_10056': {'type': 'doc', 'content': [
                {'type': 'bulletList', 'content': [
                    {'type': 'listItem', 'content': [
                        {'type': 'paragraph', 'content': [{'type': 'text', 'text': 'Link expires after 1 hour'}]}
                    ]}
                ]}
            ]},
            'status': {'name': 'In Progress'},
            'priority': {'name': 'High'},
            'assignee': {'displayName': 'Sam Lee'},
            'reporter': {'displayName': 'Alex Kim'},
            'created': 'not-a-date',
            'labels': ['auth', 'email'],
            'components': [{'name': 'Accounts'}],
            'comment': {'comments': [{'author': {'displayName': 'Dana'}, 'body': adf('Check rate limits.')}]}
        }
    }


class TestFormatIssueForLlm:

    def test_contains_all_sections(self, issue):
        details = format_issue_for_llm(issue)

        assert details.startswith("Jira Issue Details:\nIssue Key: PROJ-42\nSummary: Password reset\n")
        assert "Description: Users can reset their password by email." in details
        assert "Acceptance Criteria:\n* Link expires after 1 hour" in details
        assert "Status: In Progress" in details
        assert "Priority: High" in details
        assert "Assignee: Sam Lee" in details
        assert "Reporter: Alex Kim" in details
        assert "Components: Accounts" in details
        assert "Labels: auth, email" in details
        assert "  - Dana: Check rate limits." in details

    def test_unparsable_timestamp_is_kept(self, issue):
        assert "Created: not-a-date" in format_issue_for_llm(issue)

    def test_iso_timestamp_is_reformatted(self, issue):
        issue['fields']['updated'] = '2024-03-01T10:15:30.000+0000'

        details = format_issue_for_llm(issue)

        updated_line = next(line for line in details.split('\n') if line.startswith('Updated: '))
        assert len(updated_line) == len('Updated: 2024-03-01 10:15:30')

    def test_missing_fields_use_placeholders(self):
        details = format_issue_for_llm({'key': 'PROJ-1', 'fields': {}})

        assert "Summary: N/A" in details
        assert "Description: N/A" in details
        assert "Acceptance Criteria: N/A" in details
        assert "Assignee: Unassigned" in details
        assert "Labels:" not in details
        assert "Comments:" not in details

    def test_custom_acceptance_criteria_field(self, issue):
        issue['fields']['customfield_20000'] = adf('Custom field criteria')

        details = format_issue_for_llm(issue, acceptance_criteria_field='customfield_20000')

        assert "Acceptance Criteria:\nCustom field criteria" in details

    def test_no_issue_gives_empty_text(self):
        assert format_issue_for_llm(None) == ''


class TestIssueClient:

    @pytest.fixture
    def settings(self):
        return JiraSettings(jira_url='https://test.atlassian.net', jira_username='qa@example.com',
                            jira_api_token='secret')

    def test_fetch_issue_goes_through_proxy(self, settings, issue):
        proxy_client = Mock()
        proxy_client.fetch_jira_issue.return_value = issue
        client = IssueClient(proxy_client)

        result = client.fetch_issue(settings, ' PROJ-42 ')

        assert result == issue
        proxy_client.fetch_jira_issue.assert_called_once_with(
            'https://test.atlassian.net', 'qa@example.com', 'secret', 'PROJ-42'
        )

    def test_incomplete_settings_rejected(self, issue):
        proxy_client = Mock()
        client = IssueClient(proxy_client)

        with pytest.raises(ConfigurationMissing, match="Please provide Jira URL, Username, and API Token."):
            client.fetch_issue(JiraSettings(jira_url='https://test.atlassian.net'), 'PROJ-42')
        proxy_client.fetch_jira_issue.assert_not_called()

    def test_empty_issue_id_rejected(self, settings):
        proxy_client = Mock()
        client = IssueClient(proxy_client)

        with pytest.raises(ConfigurationMissing, match="Please enter a Jira Issue ID."):
            client.fetch_issue(settings, '   ')
        proxy_client.fetch_jira_issue.assert_not_called()

    def test_proxy_failure_propagates(self, settings):
        proxy_client = Mock()
        proxy_client.fetch_jira_issue.side_effect = RemoteRequestFailed("Jira API Error: 404 - missing", 404)
        client = IssueClient(proxy_client)

        with pytest.raises(RemoteRequestFailed):
            client.fetch_issue(settings, 'PROJ-404')
