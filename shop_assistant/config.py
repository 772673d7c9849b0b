"""
Runtime configuration for the shopping assistant.

Values come from environment variables (optionally via a local .env file)
and are exposed as module constants. Constructors accept explicit
overrides and fall back to these.
"""

import os

from dotenv import load_dotenv

# Load environment variables
load_dotenv()


# Oracle
OPENAI_API_KEY = os.getenv("OPENAI_API_KEY")
OPENAI_BASE_URL = os.getenv("OPENAI_BASE_URL", "https://api.openai.com/v1")
CHAT_MODEL = os.getenv("CHAT_MODEL", "gpt-4o-mini")
CHAT_TEMPERATURE = float(os.getenv("CHAT_TEMPERATURE", "0.7"))
CHAT_MAX_COMPLETION_TOKENS = int(os.getenv("CHAT_MAX_COMPLETION_TOKENS", "500"))
CHAT_TOP_P = 1.0
CHAT_FREQUENCY_PENALTY = 0.0
CHAT_PRESENCE_PENALTY = 0.0

# Catalog and checkout
CATALOG_DB_PATH = os.getenv("CATALOG_DB_PATH", "./db/catalog.db")
PRODUCTS_PATH = os.getenv("PRODUCTS_PATH", "./data/products.json")
FRONTEND_URL = os.getenv("FRONTEND_URL", "http://localhost:5173")

# Conversation store limits, 0 disables
CONVERSATION_MAX_SESSIONS = int(os.getenv("CONVERSATION_MAX_SESSIONS", "1000"))
CONVERSATION_TTL_SECONDS = float(os.getenv("CONVERSATION_TTL_SECONDS", "86400"))

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
