"""Exceptions raised along the chat pipeline."""


class AssistantError(Exception):
    """Base class for shopping assistant errors."""


class InputValidationError(AssistantError):
    """Message or user identifier missing; nothing was changed."""


class ModelInvocationError(AssistantError):
    """The language model call itself failed (transport, auth, quota)."""


class SchemaDecodeError(AssistantError):
    """Model output is not valid JSON or does not match the expected shape."""


class CatalogResolutionMiss(AssistantError):
    """A product id did not resolve against the catalog."""

    def __init__(self, product_id: str):
        super().__init__(f"Product {product_id} not found")
        self.product_id = product_id
