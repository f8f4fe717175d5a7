"""
Generation Prompts
Prompts and response schemas for issue summaries, acceptance criteria and test cases.
"""


class GenerationPrompts:
    """Prompts for content generation"""

    @staticmethod
    def get_summary_prompt_template() -> str:
        """Get the template for summarizing a Jira issue"""
        return """Summarize the following Jira Issue Details concisely in 2-3 sentences.

{issue_details}"""

    @staticmethod
    def get_acceptance_criteria_prompt_template() -> str:
        """Get the template for suggesting acceptance criteria"""
        return """Based on the following Jira Issue Details, suggest a list of acceptance criteria. Provide the output as a JSON array of strings.

{issue_details}

Example JSON format:
[
  "User can log in with valid credentials.",
  "Error message is displayed for invalid credentials.",
  "Password reset functionality works as expected."
]"""

    @staticmethod
    def get_test_case_prompt_template() -> str:
        """Get the template for generating structured test cases"""
        return """Based on the following Jira Issue Details, generate a comprehensive set of test cases. Include positive, negative, and edge-case scenarios. Provide the output as a JSON array of objects, where each object has 'title' (string), 'type' (string, e.g., 'Positive', 'Negative', 'Edge Case'), and 'steps' (an array of strings).

{issue_details}

Example JSON format:
[
  {{
    "title": "Verify successful login with valid credentials",
    "type": "Positive",
    "steps": [
      "Navigate to login page.",
      "Enter valid username and password.",
      "Click login button.",
      "Verify user is redirected to dashboard."
    ]
  }}
]"""

    @staticmethod
    def get_acceptance_criteria_schema() -> dict:
        """Gemini response schema: a list of criteria strings"""
        return {
            "type": "ARRAY",
            "items": {"type": "STRING"}
        }

    @staticmethod
    def get_test_case_schema() -> dict:
        """Gemini response schema: a list of {title, type, steps} objects"""
        return {
            "type": "ARRAY",
            "items": {
                "type": "OBJECT",
                "properties": {
                    "title": {"type": "STRING"},
                    "type": {"type": "STRING"},
                    "steps": {
                        "type": "ARRAY",
                        "items": {"type": "STRING"}
                    }
                },
                "propertyOrdering": ["title", "type", "steps"]
            }
        }
