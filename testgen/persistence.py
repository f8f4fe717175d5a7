"""
Persistence Gateway
Per-user Jira settings and saved test case sets on top of the document store
"""
import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from pydantic import ValidationError

from .config import DEFAULT_APP_ID
from .document_store import DocumentStore
from .errors import ConfigurationMissing, PersistenceFailed
from .models import JiraSettings, SavedTestCaseSet, TestCase

logger = logging.getLogger(__name__)


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat().replace('+00:00', 'Z')


class PersistenceGateway:
    """Reads and writes user documents under artifacts/<app_id>/users/<user_id>/..."""

    def __init__(self, store: DocumentStore, app_id: str = DEFAULT_APP_ID):
        self.store = store
        self.app_id = app_id

    def _user_root(self, user_id: str) -> str:
        if not user_id or '/' in user_id:
            raise ConfigurationMissing("A valid user ID is required.")
        return f"artifacts/{self.app_id}/users/{user_id}"

    def jira_config_path(self, user_id: str) -> str:
        return f"{self._user_root(user_id)}/jira_config/config_doc"

    def test_cases_collection(self, user_id: str) -> str:
        return f"{self._user_root(user_id)}/test_cases"

    def test_cases_path(self, user_id: str, issue_id: str) -> str:
        if not issue_id or '/' in issue_id:
            raise ConfigurationMissing("A valid Jira Issue ID is required.")
        return f"{self.test_cases_collection(user_id)}/{issue_id}"

    # ---- Jira settings ------------------------------------------------

    def load_jira_settings(self, user_id: str) -> Optional[JiraSettings]:
        data = self.store.get(self.jira_config_path(user_id))
        if data is None:
            return None
        try:
            return JiraSettings.model_validate(data)
        except ValidationError as e:
            raise PersistenceFailed(f"Stored Jira configuration is invalid: {e}") from e

    def save_jira_settings(self, user_id: str, settings: JiraSettings) -> JiraSettings:
        if not settings.is_complete():
            raise ConfigurationMissing("All Jira configuration fields are required to save.")

        saved = settings.model_copy(update={'last_updated': _now_iso()})
        self.store.set(self.jira_config_path(user_id), saved.to_document())
        logger.info(f"Saved Jira configuration for user {user_id}")
        return saved

    # ---- Test cases ---------------------------------------------------

    def save_test_cases(self, user_id: str, issue_id: str, test_cases: List[TestCase],
                        issue: Optional[Dict[str, Any]] = None) -> SavedTestCaseSet:
        if not test_cases:
            raise ConfigurationMissing("There are no test cases to save.")

        issue = issue or {}
        saved = SavedTestCaseSet(
            test_cases=list(test_cases),
            saved_at=_now_iso(),
            issue_key=issue.get('key'),
            summary=(issue.get('fields') or {}).get('summary')
        )
        self.store.set(self.test_cases_path(user_id, issue_id), saved.to_document())
        logger.info(f"Saved {len(test_cases)} test cases for {issue_id} (user {user_id})")
        return saved

    def load_test_cases(self, user_id: str, issue_id: str) -> Optional[SavedTestCaseSet]:
        data = self.store.get(self.test_cases_path(user_id, issue_id))
        if data is None:
            return None
        try:
            return SavedTestCaseSet.model_validate(data)
        except ValidationError as e:
            raise PersistenceFailed(f"Saved test cases for {issue_id} are invalid: {e}") from e

    def list_saved_test_cases(self, user_id: str) -> Dict[str, SavedTestCaseSet]:
        saved: Dict[str, SavedTestCaseSet] = {}
        for doc_id, data in self.store.list(self.test_cases_collection(user_id)).items():
            if not isinstance(data, dict) or not isinstance(data.get('testCases'), list):
                logger.debug(f"Skipping {doc_id}: no test cases stored")
                continue
            try:
                saved[doc_id] = SavedTestCaseSet.model_validate(data)
            except ValidationError as e:
                logger.warning(f"Skipping invalid saved test cases {doc_id}: {e}")
        return saved

    def delete_test_cases(self, user_id: str, issue_id: str) -> bool:
        deleted = self.store.delete(self.test_cases_path(user_id, issue_id))
        if deleted:
            logger.info(f"Deleted saved test cases for {issue_id} (user {user_id})")
        return deleted
