import json
import logging
from typing import Any, Dict, List

from pydantic import TypeAdapter, ValidationError

from .errors import ConfigurationMissing, ResponseShapeUnexpected
from .issue_client import format_issue_for_llm
from .config import DEFAULT_ACCEPTANCE_CRITERIA_FIELD
from .models import TestCase
from .prompts import Prompts
from .proxy_client import ProxyClient

logger = logging.getLogger(__name__)

_criteria_adapter = TypeAdapter(List[str])
_test_cases_adapter = TypeAdapter(List[TestCase])


def extract_candidate_text(result: Any) -> str:
    """
    Pull the first candidate's first text part out of a Gemini response.

    Raises:
        ResponseShapeUnexpected: If the response has no candidate text
    """
    try:
        text = result['candidates'][0]['content']['parts'][0]['text']
    except (KeyError, IndexError, TypeError):
        raise ResponseShapeUnexpected("Gemini LLM did not return content in the expected format.")

    if not isinstance(text, str):
        raise ResponseShapeUnexpected("Gemini LLM did not return content in the expected format.")
    return text


def _strip_code_fences(response: str) -> str:
    """Remove a surrounding markdown code block from a JSON reply"""
    response = response.strip()
    if response.startswith('```json'):
        response = response[7:]
    elif response.startswith('```'):
        response = response[3:]
    if response.endswith('```'):
        response = response[:-3]
    return response.strip()


def parse_json_reply(text: str) -> Any:
    """
    Parse the model's JSON reply.

    Replies are expected to be JSON already (schema-constrained generation); only a
    surrounding markdown fence is tolerated. Anything else fails closed.
    """
    try:
        return json.loads(_strip_code_fences(text))
    except json.JSONDecodeError as e:
        logger.error(f"Generated response is not valid JSON: {e}")
        logger.debug(f"Response preview: {text[:500]}")
        raise ResponseShapeUnexpected(f"LLM did not return valid JSON: {e}") from e


class TestCaseGenerator:
    """Generates issue summaries, acceptance criteria and test cases through the proxy"""
    __test__ = False

    def __init__(self, proxy_client: ProxyClient,
                 acceptance_criteria_field: str = DEFAULT_ACCEPTANCE_CRITERIA_FIELD):
        self.proxy_client = proxy_client
        self.acceptance_criteria_field = acceptance_criteria_field

    def _issue_details(self, issue: Dict[str, Any]) -> str:
        if not issue:
            raise ConfigurationMissing("Please fetch Jira issue details first.")
        return format_issue_for_llm(issue, self.acceptance_criteria_field)

    def summarize_issue(self, issue: Dict[str, Any]) -> str:
        """Generate a 2-3 sentence plain-text summary of the issue"""
        prompt = Prompts.get_summary_prompt(self._issue_details(issue))
        logger.info(f"Summarizing issue {issue.get('key')}")

        result = self.proxy_client.generate(prompt)
        summary = extract_candidate_text(result).strip()
        if not summary:
            raise ResponseShapeUnexpected("Gemini LLM did not return a summary.")
        return summary

    def suggest_acceptance_criteria(self, issue: Dict[str, Any]) -> List[str]:
        """Generate a list of acceptance criteria for the issue"""
        prompt = Prompts.get_acceptance_criteria_prompt(self._issue_details(issue))
        logger.info(f"Suggesting acceptance criteria for issue {issue.get('key')}")

        result = self.proxy_client.generate(
            prompt,
            response_schema=Prompts.get_acceptance_criteria_schema()
        )
        parsed = parse_json_reply(extract_candidate_text(result))

        try:
            criteria = _criteria_adapter.validate_python(parsed)
        except ValidationError as e:
            logger.error(f"Acceptance criteria reply has an unexpected shape: {e}")
            raise ResponseShapeUnexpected(
                "Gemini LLM did not return acceptance criteria in expected format."
            ) from e

        logger.info(f"Received {len(criteria)} acceptance criteria")
        return criteria

    def generate_test_cases(self, issue: Dict[str, Any]) -> List[TestCase]:
        """Generate positive, negative and edge-case test cases for the issue"""
        prompt = Prompts.get_test_case_prompt(self._issue_details(issue))
        logger.info(f"Generating test cases for issue {issue.get('key')}")

        generation_config = {
            "responseMimeType": "application/json",
            "responseSchema": Prompts.get_test_case_schema()
        }
        result = self.proxy_client.generate(prompt, generation_config=generation_config)
        parsed = parse_json_reply(extract_candidate_text(result))

        try:
            test_cases = _test_cases_adapter.validate_python(parsed)
        except ValidationError as e:
            logger.error(f"Test case reply has an unexpected shape: {e}")
            raise ResponseShapeUnexpected("Gemini LLM did not return expected test case format.") from e

        logger.info(f"Generated {len(test_cases)} test cases")
        return test_cases
