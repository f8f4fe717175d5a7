"""
Centralized Prompt Templates
All LLM prompts are defined here for better maintainability and consistency.
"""
from .generation import GenerationPrompts


class Prompts:
    """Centralized prompt templates organized by category"""

    # ==========================================
    # GENERATION PROMPTS
    # ==========================================

    @staticmethod
    def get_summary_prompt(issue_details: str) -> str:
        """Build the issue summary prompt"""
        return GenerationPrompts.get_summary_prompt_template().format(issue_details=issue_details)

    @staticmethod
    def get_acceptance_criteria_prompt(issue_details: str) -> str:
        """Build the acceptance criteria prompt"""
        return GenerationPrompts.get_acceptance_criteria_prompt_template().format(issue_details=issue_details)

    @staticmethod
    def get_test_case_prompt(issue_details: str) -> str:
        """Build the test case generation prompt"""
        return GenerationPrompts.get_test_case_prompt_template().format(issue_details=issue_details)

    # ==========================================
    # RESPONSE SCHEMAS
    # ==========================================

    @staticmethod
    def get_acceptance_criteria_schema() -> dict:
        return GenerationPrompts.get_acceptance_criteria_schema()

    @staticmethod
    def get_test_case_schema() -> dict:
        return GenerationPrompts.get_test_case_schema()
