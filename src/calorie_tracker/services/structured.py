"""Structured language model calls with validated results."""

import logging
from dataclasses import dataclass
from typing import Protocol, TypeVar

from pydantic import BaseModel, ValidationError

from calorie_tracker.domain.errors import AIServiceError

_logger = logging.getLogger(__name__)

ResultT = TypeVar("ResultT", bound=BaseModel)


class StructuredModelClient(Protocol):
    """Interface for LLM calls constrained by a JSON schema."""

    async def generate(  # noqa: PLR0913
        self,
        *,
        model: str,
        reasoning_effort: str | None,
        store: bool,
        prompt: str,
        schema: dict[str, object],
        schema_name: str,
        image_data_url: str | None = None,
    ) -> dict[str, object]:
        """Return the parsed JSON object produced by the model."""


@dataclass
class StructuredModel:
    """Configured model that turns prompts into validated pydantic results."""

    client: StructuredModelClient
    model: str
    reasoning_effort: str | None
    store: bool

    async def request(
        self,
        result_type: type[ResultT],
        *,
        prompt: str,
        schema: dict[str, object],
        schema_name: str,
        image_data_url: str | None = None,
    ) -> ResultT:
        """Call the model and validate its output, raising ``AIServiceError``."""
        try:
            raw = await self.client.generate(
                model=self.model,
                reasoning_effort=self.reasoning_effort,
                store=self.store,
                prompt=prompt,
                schema=schema,
                schema_name=schema_name,
                image_data_url=image_data_url,
            )
        except Exception as exc:
            _logger.exception("Model call %s failed", schema_name)
            raise AIServiceError(f"The {schema_name} request failed: {exc}") from exc
        try:
            return result_type.model_validate(raw)
        except ValidationError as exc:
            _logger.exception("Model output for %s did not validate", schema_name)
            raise AIServiceError(
                f"The {schema_name} response was malformed: {exc.error_count()} errors"
            ) from exc


def nullable(schema: dict[str, object]) -> dict[str, object]:
    """Allow ``null`` next to the given schema, as strict mode requires."""
    return {"anyOf": [schema, {"type": "null"}]}


def object_schema(properties: dict[str, dict[str, object]]) -> dict[str, object]:
    """Strict object schema where every property is required."""
    return {
        "type": "object",
        "properties": properties,
        "required": list(properties),
        "additionalProperties": False,
    }


def items_schema(item: dict[str, object], **extra: dict[str, object]) -> dict[str, object]:
    """Wrap an item schema into ``{"items": [...]}`` plus any extra fields."""
    return object_schema({"items": {"type": "array", "items": item}, **extra})
