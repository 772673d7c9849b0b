"""
Shopping Assistant

A conversational shopping assistant that keeps a per-user dialogue,
extracts structured shopping intent from a language model and, once it
knows enough, recommends one product from the catalog.
"""

from shop_assistant.models import (
    Turn,
    StructuredReply,
    RecommendationChoice,
    Product,
    ProductSummary,
    CheckoutSession,
    ChatResponse
)
from shop_assistant.errors import (
    InputValidationError,
    ModelInvocationError,
    SchemaDecodeError,
    CatalogResolutionMiss
)
from shop_assistant.conversation_store import ConversationStore
from shop_assistant.database import Database, get_database
from shop_assistant.catalog import CatalogGateway, initialize_catalog
from shop_assistant.payments import CheckoutGateway
from shop_assistant.recommender import RecommendationFlow, RecommendationStatus
from shop_assistant.orchestrator import ShoppingAssistant

__version__ = "1.0.0"
__all__ = [
    "Turn",
    "StructuredReply",
    "RecommendationChoice",
    "Product",
    "ProductSummary",
    "CheckoutSession",
    "ChatResponse",
    "InputValidationError",
    "ModelInvocationError",
    "SchemaDecodeError",
    "CatalogResolutionMiss",
    "ConversationStore",
    "Database",
    "get_database",
    "CatalogGateway",
    "initialize_catalog",
    "CheckoutGateway",
    "RecommendationFlow",
    "RecommendationStatus",
    "ShoppingAssistant",
]
