"""
Strict decoding of schema-constrained model output.

Model text is parsed as JSON and validated against the expected pydantic
shape with no coercion and no unknown keys. Only the shape is checked:
for example an out-of-set ``product_category`` is passed through as is.
"""

from dataclasses import dataclass
from typing import Any, Optional, Type, TypeVar

from pydantic import BaseModel, ValidationError

from shop_assistant.errors import SchemaDecodeError
from shop_assistant.models import RecommendationChoice, StructuredReply

ModelT = TypeVar("ModelT", bound=BaseModel)


@dataclass(frozen=True)
class DecodeResult:
    """Either a decoded value or the reason decoding failed."""
    value: Optional[Any] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None


def decode_strict(model_cls: Type[ModelT], raw: Optional[str]) -> ModelT:
    """
    Decode raw model output into ``model_cls``.

    Raises:
        SchemaDecodeError: Output is empty, not JSON, or the wrong shape
    """
    if raw is None or not raw.strip():
        raise SchemaDecodeError("Model returned no content")
    try:
        return model_cls.model_validate_json(raw, strict=True)
    except ValidationError as e:
        raise SchemaDecodeError(str(e)) from e


def _interpret(model_cls: Type[BaseModel], raw: Optional[str]) -> DecodeResult:
    try:
        return DecodeResult(value=decode_strict(model_cls, raw))
    except SchemaDecodeError as e:
        return DecodeResult(error=str(e))


def interpret_reply(raw: Optional[str]) -> DecodeResult:
    """Decode a primary reply into a StructuredReply result."""
    return _interpret(StructuredReply, raw)


def interpret_choice(raw: Optional[str]) -> DecodeResult:
    """Decode a recommendation call into a RecommendationChoice result."""
    return _interpret(RecommendationChoice, raw)
