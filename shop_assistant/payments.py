"""
Checkout sessions for recommended products.

Creates a hosted-checkout session for one product and hands back the URL
the shopper should be redirected to. Chat turns do not call this yet; it
is reached through the checkout endpoint.
"""

from datetime import datetime
from typing import Optional
import uuid

from shop_assistant.catalog import CatalogGateway
from shop_assistant.config import FRONTEND_URL
from shop_assistant.database import Database
from shop_assistant.errors import CatalogResolutionMiss
from shop_assistant.logger import get_logger
from shop_assistant.models import CheckoutSession

logger = get_logger("payments")


class CheckoutGateway:
    """Persists checkout sessions next to the catalog they reference."""

    def __init__(
        self,
        database: Database,
        catalog: Optional[CatalogGateway] = None,
        frontend_url: Optional[str] = None
    ):
        self.database = database
        self.catalog = catalog if catalog is not None else CatalogGateway(database)
        self.frontend_url = (frontend_url or FRONTEND_URL).rstrip("/")

    def create_checkout_session(self, product_id: str) -> CheckoutSession:
        """
        Open a checkout session for a single unit of a product.

        Args:
            product_id: Catalog identifier of the product to buy

        Returns:
            The persisted CheckoutSession with its redirect URL

        Raises:
            CatalogResolutionMiss: The product id is unknown
        """
        product = self.catalog.get_product(product_id)
        if product is None:
            raise CatalogResolutionMiss(product_id)

        session_id = str(uuid.uuid4())
        session = CheckoutSession(
            session_id=session_id,
            product_id=product.product_id,
            product_name=product.name,
            unit_amount=round(product.price * 100),
            redirect_url=f"{self.frontend_url}/checkout/{session_id}",
            success_url=f"{self.frontend_url}/success",
            cancel_url=f"{self.frontend_url}/cancel"
        )

        with self.database.connection() as conn:
            conn.execute("""
                INSERT INTO checkout_sessions (
                    session_id, product_id, product_name, unit_amount, currency,
                    quantity, status, redirect_url, success_url, cancel_url, created_at
                ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
            """, (
                session.session_id,
                session.product_id,
                session.product_name,
                session.unit_amount,
                session.currency,
                session.quantity,
                session.status,
                session.redirect_url,
                session.success_url,
                session.cancel_url,
                session.created_at.isoformat()
            ))

        logger.info(f"Opened checkout session {session.session_id} for {product_id}")
        return session

    def get_checkout_session(self, session_id: str) -> Optional[CheckoutSession]:
        with self.database.connection() as conn:
            row = conn.execute("""
                SELECT * FROM checkout_sessions WHERE session_id = ?
            """, (session_id,)).fetchone()

        if not row:
            return None

        return CheckoutSession(
            session_id=row['session_id'],
            product_id=row['product_id'],
            product_name=row['product_name'],
            unit_amount=row['unit_amount'],
            currency=row['currency'],
            quantity=row['quantity'],
            status=row['status'],
            redirect_url=row['redirect_url'],
            success_url=row['success_url'],
            cancel_url=row['cancel_url'],
            created_at=datetime.fromisoformat(row['created_at'])
        )

    def update_status(self, session_id: str, status: str) -> bool:
        """
        Move a session to a new status.

        Returns:
            True if the session was updated, False if not found
        """
        if status not in ("open", "complete", "expired"):
            raise ValueError(f"Unknown checkout status: {status}")

        with self.database.connection() as conn:
            cursor = conn.execute("""
                UPDATE checkout_sessions SET status = ? WHERE session_id = ?
            """, (status, session_id))
            return cursor.rowcount > 0
