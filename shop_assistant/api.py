"""
HTTP API for the shopping assistant.

Usage:
    uvicorn shop_assistant.api:app --reload --port 8000
"""

from functools import lru_cache

from fastapi import Depends, FastAPI, Request
from fastapi.exception_handlers import request_validation_exception_handler
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from shop_assistant.catalog import CatalogGateway
from shop_assistant.database import get_database
from shop_assistant.errors import CatalogResolutionMiss, InputValidationError, ModelInvocationError
from shop_assistant.logger import get_logger
from shop_assistant.models import (
    ChatRequest,
    ChatResponse,
    CheckoutRequest,
    CheckoutResponse,
    ErrorResponse,
)
from shop_assistant.orchestrator import ShoppingAssistant
from shop_assistant.payments import CheckoutGateway

logger = get_logger("api")

app = FastAPI(title="Shopping Assistant API")


@lru_cache(maxsize=1)
def get_assistant() -> ShoppingAssistant:
    """Process-wide assistant, built on first use."""
    return ShoppingAssistant(catalog=CatalogGateway(get_database()))


@lru_cache(maxsize=1)
def get_checkout() -> CheckoutGateway:
    return CheckoutGateway(get_database())


@app.exception_handler(InputValidationError)
async def handle_input_error(request: Request, exc: InputValidationError) -> JSONResponse:
    logger.info(f"Rejected request to {request.url.path}: {exc}")
    return JSONResponse(status_code=400, content={"error": "Message and userId are required."})


@app.exception_handler(RequestValidationError)
async def handle_request_validation(request: Request, exc: RequestValidationError) -> JSONResponse:
    # Chat bodies of the wrong shape get the same 400 as missing fields
    if request.url.path == "/api/chat":
        logger.info(f"Rejected malformed chat body: {exc.errors()}")
        return JSONResponse(status_code=400, content={"error": "Message and userId are required."})
    return await request_validation_exception_handler(request, exc)


@app.exception_handler(ModelInvocationError)
async def handle_model_error(request: Request, exc: ModelInvocationError) -> JSONResponse:
    logger.error(f"Error handling chat: {exc}")
    return JSONResponse(status_code=500, content={"error": "Internal Server Error"})


@app.exception_handler(CatalogResolutionMiss)
async def handle_missing_product(request: Request, exc: CatalogResolutionMiss) -> JSONResponse:
    return JSONResponse(status_code=404, content={"error": "Product not found."})


@app.get("/health")
def health() -> dict:
    return {"status": "ok"}


@app.post(
    "/api/chat",
    response_model=ChatResponse,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}}
)
def chat(request: ChatRequest, assistant: ShoppingAssistant = Depends(get_assistant)) -> ChatResponse:
    """Run one chat turn for the requesting user."""
    return assistant.chat(request.message, request.user_id)


@app.post(
    "/api/checkout",
    response_model=CheckoutResponse,
    responses={404: {"model": ErrorResponse}}
)
def checkout(request: CheckoutRequest, gateway: CheckoutGateway = Depends(get_checkout)) -> CheckoutResponse:
    """Open a checkout session and return where to send the shopper."""
    session = gateway.create_checkout_session(request.product_id)
    return CheckoutResponse(redirect_link=session.redirect_url, session_id=session.session_id)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=8000)
