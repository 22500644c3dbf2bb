"""Base prompt class."""

import json
import re
from typing import Any, Dict

from sustainaview.utils.errors import InvalidResponseError

_JSON_OBJECT = re.compile(r"\{[\s\S]*\}")


class Prompt:
    """Base class for all prompts."""

    def __init__(self, template: str, system_prompt: str):
        """Initialize the prompt.

        Args:
            template: The prompt template string
            system_prompt: The system prompt
        """
        self.template = template
        self.system_prompt = system_prompt

    def format(self, **kwargs: Any) -> str:
        """Format the prompt template with variables.

        Args:
            **kwargs: Variables to format the template with

        Returns:
            str: The formatted prompt
        """
        return self.template.format(**kwargs)

    @staticmethod
    def extract_json(output: str) -> Dict[str, Any]:
        """Pull the JSON object out of a model answer.

        Handles fenced code blocks and prose around the object.

        Raises:
            InvalidResponseError: If no JSON object can be parsed
        """
        output = output.strip()

        if "```" in output:
            start = output.find("```json") + 7 if "```json" in output else output.find("```") + 3
            end = output.find("```", start)
            if end > start:
                output = output[start:end].strip()

        match = _JSON_OBJECT.search(output)
        if not match:
            raise InvalidResponseError("No JSON object in model response", raw=output)

        try:
            data = json.loads(match.group(0))
        except json.JSONDecodeError as e:
            raise InvalidResponseError(f"Invalid JSON response: {e}", raw=output)

        if not isinstance(data, dict):
            raise InvalidResponseError("Model response is not a JSON object", raw=output)
        return data
