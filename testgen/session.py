"""
Session Workbench
Explicit per-session state and the user-facing operations that drive the clients
"""
import logging
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Union

from .errors import TestGenError
from .generator import TestCaseGenerator
from .issue_client import IssueClient
from .models import JiraSettings, SavedTestCaseSet, TestCase
from .persistence import PersistenceGateway

logger = logging.getLogger(__name__)

FETCH_FIRST_MESSAGE = "Please fetch Jira issue details first"


@dataclass
class SessionState:
    """Mutable state owned by one user session"""
    user_id: str
    settings: JiraSettings = field(default_factory=JiraSettings)
    settings_loaded: bool = False
    issue_id: str = ''
    issue: Optional[Dict[str, Any]] = None
    summary: str = ''
    acceptance_criteria: List[str] = field(default_factory=list)
    test_cases: List[TestCase] = field(default_factory=list)
    saved_test_cases: Dict[str, SavedTestCaseSet] = field(default_factory=dict)

    loading: bool = False
    loading_summary: bool = False
    loading_criteria: bool = False
    loading_test_cases: bool = False

    error_message: str = ''
    success_message: str = ''
    info_message: str = ''

    def clear_messages(self):
        self.error_message = ''
        self.success_message = ''
        self.info_message = ''

    def clear_outputs(self):
        self.summary = ''
        self.acceptance_criteria = []
        self.test_cases = []


class Workbench:
    """
    Runs fetch/generate/save operations against a SessionState.

    Every operation reports its outcome through the state's messages. Failures are
    caught here and never propagate, so the session stays usable after any of them.
    """

    def __init__(self, state: SessionState, issue_client: IssueClient,
                 generator: TestCaseGenerator, persistence: PersistenceGateway):
        self.state = state
        self.issue_client = issue_client
        self.generator = generator
        self.persistence = persistence

    @contextmanager
    def _busy(self, flag: str):
        setattr(self.state, flag, True)
        try:
            yield
        finally:
            setattr(self.state, flag, False)

    def _fail(self, message: str) -> bool:
        self.state.error_message = message
        return False

    def _start(self, flag: str) -> bool:
        """Clear messages and refuse to start if the same kind of operation is in flight"""
        if getattr(self.state, flag):
            self.state.error_message = "Another request is already in progress. Please wait."
            return False
        self.state.clear_messages()
        return True

    # ---- Jira settings ------------------------------------------------

    def load_settings(self) -> bool:
        state = self.state
        try:
            settings = self.persistence.load_jira_settings(state.user_id)
        except TestGenError as e:
            logger.error(f"Error loading Jira config: {e}")
            state.info_message = ''
            return self._fail("Failed to load Jira configuration. Please try again.")
        finally:
            state.settings_loaded = True

        if settings is None:
            state.info_message = "No saved Jira configuration found. Please enter your details below to get started."
            state.success_message = ''
            return False

        state.settings = settings
        state.success_message = "Jira configuration loaded successfully!"
        state.info_message = ''
        return True

    def save_settings(self, settings: Optional[JiraSettings] = None) -> bool:
        state = self.state
        if settings is not None:
            state.settings = settings
        if not state.settings.is_complete():
            return self._fail("All Jira configuration fields are required to save.")
        if not self._start('loading'):
            return False

        with self._busy('loading'):
            try:
                state.settings = self.persistence.save_jira_settings(state.user_id, state.settings)
            except TestGenError as e:
                logger.error(f"Error saving Jira config: {e}")
                return self._fail("Failed to save Jira configuration. Please try again.")

        state.success_message = "Jira configuration saved successfully!"
        return True

    # ---- Issue --------------------------------------------------------

    def fetch_issue(self, issue_id: str) -> bool:
        state = self.state
        if not issue_id or not issue_id.strip():
            return self._fail("Please enter a Jira Issue ID.")
        if not state.settings.is_complete():
            return self._fail("Please provide Jira URL, Username, and API Token.")
        if not self._start('loading'):
            return False

        issue_id = issue_id.strip()
        state.issue_id = issue_id
        state.issue = None
        state.clear_outputs()

        with self._busy('loading'):
            try:
                state.issue = self.issue_client.fetch_issue(state.settings, issue_id)
            except TestGenError as e:
                logger.error(f"Error fetching Jira issue: {e}")
                return self._fail(
                    f"Failed to fetch Jira issue: {e}. Please check Issue ID and Jira credentials."
                )

        state.success_message = f"Successfully fetched Jira issue {issue_id}."

        saved = self._lookup_saved(issue_id)
        if saved is not None:
            state.saved_test_cases[issue_id] = saved
            state.info_message = "Found saved test cases for this issue."
        return True

    def _lookup_saved(self, issue_id: str) -> Optional[SavedTestCaseSet]:
        try:
            return self.persistence.load_test_cases(self.state.user_id, issue_id)
        except TestGenError as e:
            logger.error(f"Error loading saved test cases: {e}")
            self.state.error_message = "Failed to load saved test cases."
            return None

    # ---- Generation ---------------------------------------------------

    def summarize_issue(self) -> bool:
        state = self.state
        if not state.issue:
            return self._fail(f"{FETCH_FIRST_MESSAGE} to summarize.")
        if not self._start('loading_summary'):
            return False
        state.summary = ''

        with self._busy('loading_summary'):
            try:
                state.summary = self.generator.summarize_issue(state.issue)
            except TestGenError as e:
                logger.error(f"Error summarizing issue: {e}")
                return self._fail(f"Failed to summarize issue: {e}")

        state.success_message = "Issue summary generated successfully!"
        return True

    def suggest_acceptance_criteria(self) -> bool:
        state = self.state
        if not state.issue:
            return self._fail(f"{FETCH_FIRST_MESSAGE} to suggest acceptance criteria.")
        if not self._start('loading_criteria'):
            return False
        state.acceptance_criteria = []

        with self._busy('loading_criteria'):
            try:
                state.acceptance_criteria = self.generator.suggest_acceptance_criteria(state.issue)
            except TestGenError as e:
                logger.error(f"Error suggesting acceptance criteria: {e}")
                return self._fail(f"Failed to suggest acceptance criteria: {e}")

        state.success_message = "Acceptance criteria suggested successfully!"
        return True

    def generate_test_cases(self) -> bool:
        state = self.state
        if not state.issue:
            return self._fail(f"{FETCH_FIRST_MESSAGE}.")
        if not self._start('loading_test_cases'):
            return False
        state.test_cases = []

        with self._busy('loading_test_cases'):
            try:
                state.test_cases = self.generator.generate_test_cases(state.issue)
            except TestGenError as e:
                logger.error(f"Error generating test cases: {e}")
                return self._fail(f"Failed to generate test cases: {e}")

        state.success_message = f"Generated {len(state.test_cases)} test cases."
        return True

    # ---- Draft editing and saving -------------------------------------

    def edit_test_case(self, index: int, field_name: str, value: Union[str, List[str]]) -> bool:
        state = self.state
        if not 0 <= index < len(state.test_cases):
            return self._fail(f"No test case at position {index + 1}.")
        try:
            updated = state.test_cases[index].with_edit(field_name, value)
        except ValueError as e:
            return self._fail(str(e))

        test_cases = list(state.test_cases)
        test_cases[index] = updated
        state.test_cases = test_cases
        return True

    def save_test_cases(self) -> bool:
        state = self.state
        if not state.issue_id or not state.test_cases:
            return self._fail("There are no test cases to save.")
        if not self._start('loading'):
            return False

        with self._busy('loading'):
            try:
                saved = self.persistence.save_test_cases(
                    state.user_id, state.issue_id, state.test_cases, state.issue
                )
            except TestGenError as e:
                logger.error(f"Error saving test cases: {e}")
                return self._fail("Failed to save test cases. Please try again.")

        state.saved_test_cases[state.issue_id] = saved
        state.success_message = "Test cases saved successfully!"
        return True

    def load_saved_test_cases(self, issue_id: str) -> Optional[SavedTestCaseSet]:
        self.state.clear_messages()
        try:
            saved = self.persistence.load_test_cases(self.state.user_id, issue_id)
        except TestGenError as e:
            logger.error(f"Error loading saved test cases: {e}")
            self._fail("Failed to load saved test cases.")
            return None

        if saved is None:
            self.state.info_message = f"No saved test cases found for {issue_id}."
            return None
        self.state.saved_test_cases[issue_id] = saved
        return saved

    def list_saved_test_cases(self) -> Dict[str, SavedTestCaseSet]:
        state = self.state
        if not self._start('loading'):
            return state.saved_test_cases

        with self._busy('loading'):
            try:
                state.saved_test_cases = self.persistence.list_saved_test_cases(state.user_id)
            except TestGenError as e:
                logger.error(f"Error loading saved test cases: {e}")
                self._fail("Failed to load saved test cases.")
                return state.saved_test_cases

        if not state.saved_test_cases:
            state.info_message = "No saved test cases yet."
        return state.saved_test_cases

    def delete_saved_test_cases(self, issue_id: str) -> bool:
        self.state.clear_messages()
        try:
            deleted = self.persistence.delete_test_cases(self.state.user_id, issue_id)
        except TestGenError as e:
            logger.error(f"Error deleting saved test cases: {e}")
            return self._fail("Failed to delete saved test cases.")

        if not deleted:
            self.state.info_message = f"No saved test cases found for {issue_id}."
            return False
        self.state.saved_test_cases.pop(issue_id, None)
        self.state.success_message = f"Deleted saved test cases for {issue_id}."
        return True
