"""
LLM Gateway - Provider-agnostic interface for structured extraction calls.

Handles JSON recovery from model replies and schema validation.
"""

import json
import os
import re
from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

import jsonschema


DEFAULT_MODEL = "claude-sonnet-4-20250514"

SYSTEM_PROMPT = (
    "You extract structured fields from documents and output valid JSON only. "
    "Do not include any text before or after the JSON object. "
    "Do not use markdown code blocks. Output raw JSON only."
)


@dataclass
class LLMResponse:
    """Response from an LLM call."""
    content: dict
    raw_text: str
    model: str


@dataclass
class LLMError:
    """Error from an LLM call."""
    error_type: str
    message: str


class LLMCallError(Exception):
    """Raised when a gateway call fails; carries the LLMError."""

    def __init__(self, error: LLMError):
        super().__init__(f"{error.error_type}: {error.message}")
        self.error = error


class LLMGateway(ABC):
    """Abstract base class for LLM providers."""

    @abstractmethod
    def run_structured(
        self,
        prompt: str,
        input_data: dict,
        schema: dict,
        options: Optional[dict] = None
    ) -> LLMResponse:
        """
        Run a prompt with structured output.

        Args:
            prompt: The prompt template with {{placeholders}}
            input_data: Data to inject into placeholders
            schema: JSON schema for output validation
            options: Provider-specific options (temperature, max_tokens, etc.)

        Returns:
            LLMResponse with parsed content

        Raises:
            LLMCallError: If the call fails
        """

    def _render_prompt(self, template: str, data: dict) -> str:
        """Render a prompt template with data."""
        result = template
        for key, value in data.items():
            placeholder = f"{{{{{key}}}}}"
            if isinstance(value, (dict, list)):
                value = json.dumps(value, indent=2)
            result = result.replace(placeholder, str(value))
        return result

    def _validate_output(self, output: dict, schema: dict) -> None:
        """Validate output against JSON schema."""
        jsonschema.validate(instance=output, schema=schema)


def extract_json(text: str) -> dict:
    """Recover a JSON object from a reply that may carry extra prose.

    Tries the raw text, then fenced code blocks, then the widest {...} span.
    """
    try:
        return json.loads(text)
    except json.JSONDecodeError:
        pass

    patterns = [
        r"```json\s*([\s\S]*?)\s*```",
        r"```\s*([\s\S]*?)\s*```",
        r"\{[\s\S]*\}",
    ]
    for pattern in patterns:
        match = re.search(pattern, text)
        if match:
            try:
                json_str = match.group(1) if "```" in pattern else match.group(0)
                return json.loads(json_str)
            except (json.JSONDecodeError, IndexError):
                continue

    raise json.JSONDecodeError("No valid JSON found in response", text, 0)


class ClaudeGateway(LLMGateway):
    """Claude API implementation of LLM Gateway."""

    def __init__(self, api_key: Optional[str] = None, model: str = DEFAULT_MODEL):
        self.api_key = api_key or os.environ.get("ANTHROPIC_API_KEY")
        if not self.api_key:
            raise ValueError("ANTHROPIC_API_KEY environment variable not set")

        self.model = model

        # Import anthropic lazily to allow module to load without it installed
        try:
            import anthropic
            self.client = anthropic.Anthropic(api_key=self.api_key)
        except ImportError:
            raise ImportError("anthropic package not installed. Run: pip install anthropic")

    def run_structured(
        self,
        prompt: str,
        input_data: dict,
        schema: dict,
        options: Optional[dict] = None
    ) -> LLMResponse:
        """Run a prompt once and get structured JSON output."""
        options = options or {}

        rendered_prompt = self._render_prompt(prompt, input_data)
        schema_instruction = f"\n\nYour output must conform to this JSON schema:\n{json.dumps(schema, indent=2)}"
        full_prompt = rendered_prompt + schema_instruction

        try:
            response = self.client.messages.create(
                model=self.model,
                max_tokens=options.get("max_tokens", 4096),
                temperature=options.get("temperature", 0.0),
                system=SYSTEM_PROMPT,
                messages=[
                    {"role": "user", "content": full_prompt}
                ]
            )
            raw_text = response.content[0].text
        except Exception as e:
            raise LLMCallError(LLMError(error_type="api_error", message=str(e))) from e

        try:
            content = extract_json(raw_text)
            if not isinstance(content, dict):
                raise jsonschema.ValidationError("Top-level JSON value is not an object")
            self._validate_output(content, schema)
        except json.JSONDecodeError as e:
            raise LLMCallError(LLMError(
                error_type="parse_error",
                message=f"Failed to parse JSON: {e}"
            )) from e
        except jsonschema.ValidationError as e:
            raise LLMCallError(LLMError(
                error_type="validation_error",
                message=f"Output failed schema validation: {e.message}"
            )) from e

        return LLMResponse(content=content, raw_text=raw_text, model=response.model)


class MockGateway(LLMGateway):
    """Mock gateway for testing without API calls."""

    def __init__(self, responses: Optional[dict] = None, error: Optional[LLMError] = None):
        """
        Initialize mock gateway.

        Args:
            responses: Dict mapping prompt substrings to response dicts
            error: If set, every call raises LLMCallError with this error
        """
        self.responses = responses or {}
        self.error = error
        self.call_log: list[dict] = []

    def set_response(self, prompt_contains: str, response: dict) -> None:
        """Set a mock response for prompts containing a string."""
        self.responses[prompt_contains] = response

    def fail_with(self, error_type: str, message: str) -> None:
        """Make every subsequent call fail."""
        self.error = LLMError(error_type=error_type, message=message)

    def run_structured(
        self,
        prompt: str,
        input_data: dict,
        schema: dict,
        options: Optional[dict] = None
    ) -> LLMResponse:
        """Return mock response based on prompt content."""
        rendered = self._render_prompt(prompt, input_data)

        self.call_log.append({
            "prompt": prompt,
            "input_data": input_data,
            "schema": schema,
            "rendered": rendered
        })

        if self.error is not None:
            raise LLMCallError(self.error)

        for key, response in self.responses.items():
            if key in rendered:
                try:
                    self._validate_output(response, schema)
                except jsonschema.ValidationError as e:
                    raise LLMCallError(LLMError(
                        error_type="validation_error",
                        message=f"Output failed schema validation: {e.message}"
                    ))
                return LLMResponse(
                    content=response,
                    raw_text=json.dumps(response),
                    model="mock"
                )

        raise LLMCallError(LLMError(
            error_type="api_error",
            message=f"No mock response configured for prompt containing: {rendered[:100]}..."
        ))


def load_schema(schema_name: str) -> dict:
    """Load a JSON schema from the schemas directory."""
    schema_path = Path(__file__).parent.parent / "schemas" / f"{schema_name}.schema.json"
    if not schema_path.exists():
        raise FileNotFoundError(f"Schema not found: {schema_path}")

    with open(schema_path) as f:
        return json.load(f)
