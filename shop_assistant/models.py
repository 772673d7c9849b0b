"""
Pydantic models for the shopping assistant.

Covers the conversation turns replayed to the model, the strict shapes the
model must answer with, catalog records, checkout sessions and the HTTP
request/response payloads.
"""

from datetime import datetime, timezone
from typing import Dict, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
import uuid


# =============================================================================
# Conversation
# =============================================================================

class Turn(BaseModel):
    """
    One message in a conversation history.

    Attributes:
        role: Speaker of the turn (system, user or assistant)
        content: Message text
        timestamp: When the turn was recorded
    """
    role: str = Field(..., pattern="^(user|assistant|system)$", description="Message role")
    content: str = Field(..., description="Message content")
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc), description="Turn timestamp")

    def to_message(self) -> Dict[str, str]:
        """Chat completion message for this turn."""
        return {"role": self.role, "content": self.content}


# =============================================================================
# Structured model replies
# =============================================================================

class StrictModel(BaseModel):
    """No coercion, no unknown keys."""
    model_config = ConfigDict(extra="forbid", strict=True)


class UserPreferences(StrictModel):
    gender: str
    size: str
    category: str
    summ: str = Field(..., description="One-sentence synthesis of what is known about the user")


class ProductRecommendation(StrictModel):
    ndrec: bool = Field(..., description="True when enough is known to recommend within product_category")
    product_category: str


class PurchaseConfirmation(StrictModel):
    confirm_purchase: bool


class PaymentProcess(StrictModel):
    payment_success: bool
    redirect_link: str


class StructuredReply(StrictModel):
    """
    Decoded shape of one primary model response.

    purchase_confirmation and payment_process are part of the wire contract
    and are carried on the record, but no branch of the chat turn acts on
    them yet.
    """
    user_query: str
    display: str
    user_preferences: UserPreferences
    product_recommendation: ProductRecommendation
    purchase_confirmation: PurchaseConfirmation
    payment_process: PaymentProcess

    @property
    def wants_recommendation(self) -> bool:
        return self.product_recommendation.ndrec


class CandidateItem(BaseModel):
    """Reduced product entry offered to the model when choosing."""
    id: str
    name: str


class RecommendationChoice(StrictModel):
    """The model's pick from a candidate list."""
    item_id: str
    item_name: str


# =============================================================================
# Catalog
# =============================================================================

class ProductSummary(BaseModel):
    """Read-only product card returned alongside a reply."""
    id: str
    name: str
    image: str
    price: float


class Product(BaseModel):
    """
    Catalog product record.

    Attributes:
        product_id: Unique identifier for the product
        name: Product name
        category: Catalog category (jeans, shoes, ...)
        price: Product price (must be greater than 0)
        image: Image URL shown on the product card
        description: Optional free-text description
    """
    product_id: str = Field(..., min_length=1, description="Unique product identifier")
    name: str = Field(..., min_length=1, description="Product name")
    category: str = Field(..., min_length=1, description="Product category")
    price: float = Field(..., gt=0, description="Product price in USD")
    image: str = Field("", description="Product image URL")
    description: Optional[str] = Field(None, description="Product description")

    @field_validator('price')
    @classmethod
    def validate_price(cls, v: float) -> float:
        """Ensure price has at most 2 decimal places."""
        return round(v, 2)

    def to_summary(self) -> ProductSummary:
        return ProductSummary(
            id=self.product_id,
            name=self.name,
            image=self.image,
            price=self.price
        )


# =============================================================================
# Checkout
# =============================================================================

class CheckoutSession(BaseModel):
    """
    Hosted checkout session for a single product.

    Attributes:
        session_id: Unique session identifier (auto-generated UUID)
        product_id: Product being paid for
        product_name: Product name at time of checkout
        unit_amount: Price in cents
        currency: ISO currency code
        quantity: Number of units
        status: open, complete or expired
        redirect_url: Where the shopper is sent to pay
        success_url: Where the shopper lands after paying
        cancel_url: Where the shopper lands after cancelling
        created_at: Session creation timestamp
    """
    session_id: str = Field(default_factory=lambda: str(uuid.uuid4()), description="Checkout session ID")
    product_id: str = Field(..., min_length=1)
    product_name: str = Field(..., min_length=1)
    unit_amount: int = Field(..., gt=0, description="Unit price in cents")
    currency: str = Field("usd")
    quantity: int = Field(1, ge=1)
    status: str = Field("open", pattern="^(open|complete|expired)$")
    redirect_url: str
    success_url: str
    cancel_url: str
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


# =============================================================================
# HTTP payloads
# =============================================================================

class ChatRequest(BaseModel):
    """Incoming chat message; both fields are checked by the assistant."""
    model_config = ConfigDict(populate_by_name=True)

    message: Optional[str] = None
    user_id: Optional[str] = Field(None, alias="userId")


class ChatResponse(BaseModel):
    """Reply text plus an optional recommended product."""
    reply: str
    recommendation: Optional[ProductSummary] = None


class CheckoutRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    product_id: str = Field(..., min_length=1, alias="productId")


class CheckoutResponse(BaseModel):
    redirect_link: str
    session_id: str


class ErrorResponse(BaseModel):
    error: str
