import sqlite3

import pytest
from testgen.document_store import DocumentStore
from testgen.persistence import PersistenceGateway
from testgen.errors import ConfigurationMissing, PersistenceFailed
from testgen.models import JiraSettings, TestCase


@pytest.fixture
def store(tmp_path):
    return DocumentStore(tmp_path / "nested" / "testgen.db")


@pytest.fixture
def gateway(store):
    return PersistenceGateway(store, app_id="test-app")


@pytest.fixture
def test_cases():
    return [
        TestCase(title="Valid login", type="Positive", steps=["Open page", "Log in"]),
        TestCase(title="Wrong password", type="Negative", steps=["Enter wrong password"]),
    ]


class TestDocumentStore:

    def test_set_get_and_overwrite(self, store):
        store.set("a/b/doc", {"value": 1})
        store.set("a/b/doc", {"value": 2})

        assert store.get("a/b/doc") == {"value": 2}

    def test_get_missing_returns_none(self, store):
        assert store.get("a/b/missing") is None

    def test_list_returns_direct_children_only(self, store):
        store.set("users/u1/test_cases/PROJ-2", {"n": 2})
        store.set("users/u1/test_cases/PROJ-1", {"n": 1})
        store.set("users/u1/test_cases/PROJ-1/history/v1", {"n": 0})
        store.set("users/u2/test_cases/PROJ-9", {"n": 9})

        assert store.list("users/u1/test_cases") == {"PROJ-1": {"n": 1}, "PROJ-2": {"n": 2}}

    def test_delete(self, store):
        store.set("a/b/doc", {"value": 1})

        assert store.delete("a/b/doc") is True
        assert store.delete("a/b/doc") is False
        assert store.get("a/b/doc") is None

    def test_single_segment_path_rejected(self, store):
        with pytest.raises(PersistenceFailed):
            store.get("doc")

    def test_unserializable_document_rejected(self, store):
        with pytest.raises(PersistenceFailed):
            store.set("a/b/doc", {"value": object()})

    def test_corrupt_row_raises(self, store):
        conn = sqlite3.connect(str(store.db_path))
        conn.execute("INSERT INTO documents (collection, doc_id, data) VALUES ('a/b', 'doc', 'not json')")
        conn.commit()
        conn.close()

        with pytest.raises(PersistenceFailed):
            store.get("a/b/doc")


class TestJiraSettingsPersistence:

    def test_document_path(self, gateway):
        assert gateway.jira_config_path("u1") == "artifacts/test-app/users/u1/jira_config/config_doc"

    def test_load_missing_returns_none(self, gateway):
        assert gateway.load_jira_settings("u1") is None

    def test_save_and_load(self, gateway, store):
        settings = JiraSettings(jira_url="https://x.atlassian.net", jira_username="qa@example.com",
                                jira_api_token="tok")

        saved = gateway.save_jira_settings("u1", settings)

        assert saved.last_updated.endswith("Z")
        raw = store.get("artifacts/test-app/users/u1/jira_config/config_doc")
        assert raw == {
            "jiraUrl": "https://x.atlassian.net",
            "jiraUsername": "qa@example.com",
            "jiraApiToken": "tok",
            "lastUpdated": saved.last_updated
        }
        assert gateway.load_jira_settings("u1") == saved

    def test_incomplete_settings_not_saved(self, gateway):
        with pytest.raises(ConfigurationMissing):
            gateway.save_jira_settings("u1", JiraSettings(jira_url="https://x.atlassian.net"))
        assert gateway.load_jira_settings("u1") is None

    def test_users_are_isolated(self, gateway):
        gateway.save_jira_settings("u1", JiraSettings(jira_url="https://x", jira_username="a", jira_api_token="t"))

        assert gateway.load_jira_settings("u2") is None

    @pytest.mark.parametrize("user_id", ["", "a/b"])
    def test_invalid_user_id(self, gateway, user_id):
        with pytest.raises(ConfigurationMissing):
            gateway.load_jira_settings(user_id)


class TestTestCasePersistence:

    @pytest.fixture
    def issue(self):
        return {"key": "PROJ-1", "fields": {"summary": "Login page"}}

    def test_save_stores_issue_metadata(self, gateway, store, test_cases, issue):
        saved = gateway.save_test_cases("u1", "PROJ-1", test_cases, issue)

        raw = store.get("artifacts/test-app/users/u1/test_cases/PROJ-1")
        assert raw["issueKey"] == "PROJ-1"
        assert raw["summary"] == "Login page"
        assert raw["savedAt"] == saved.saved_at
        assert raw["testCases"][0] == {"title": "Valid login", "type": "Positive", "steps": ["Open page", "Log in"]}

    def test_save_overwrites_previous_set(self, gateway, test_cases, issue):
        gateway.save_test_cases("u1", "PROJ-1", test_cases, issue)
        gateway.save_test_cases("u1", "PROJ-1", test_cases[:1], issue)

        assert gateway.load_test_cases("u1", "PROJ-1").test_cases == test_cases[:1]

    def test_save_empty_rejected(self, gateway):
        with pytest.raises(ConfigurationMissing):
            gateway.save_test_cases("u1", "PROJ-1", [])

    def test_load_missing_returns_none(self, gateway):
        assert gateway.load_test_cases("u1", "PROJ-404") is None

    def test_list_skips_documents_without_test_cases(self, gateway, store, test_cases, issue):
        gateway.save_test_cases("u1", "PROJ-1", test_cases, issue)
        store.set("artifacts/test-app/users/u1/test_cases/PROJ-2", {"note": "draft"})

        saved = gateway.list_saved_test_cases("u1")

        assert list(saved) == ["PROJ-1"]
        assert len(saved["PROJ-1"].test_cases) == 2

    def test_delete(self, gateway, test_cases):
        gateway.save_test_cases("u1", "PROJ-1", test_cases)

        assert gateway.delete_test_cases("u1", "PROJ-1") is True
        assert gateway.load_test_cases("u1", "PROJ-1") is None
        assert gateway.delete_test_cases("u1", "PROJ-1") is False

    def test_invalid_stored_set_raises(self, gateway, store):
        store.set("artifacts/test-app/users/u1/test_cases/PROJ-1", {"testCases": [{"title": "no type"}]})

        with pytest.raises(PersistenceFailed):
            gateway.load_test_cases("u1", "PROJ-1")
