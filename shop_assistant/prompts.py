"""
Prompts and response formats sent to the language model.

The primary call replays the whole conversation and must answer with the
``ecommerce_ai_assistant`` shape. The recommendation call sees a single
system instruction and must answer with an item id and name.
"""

import json
from typing import List

from shop_assistant.models import CandidateItem


PRODUCT_CATEGORIES = ["jeans", "t-shirts", "shoes", "glasses", "jackets", "suits", "bags"]


# =============================================================================
# System Prompts
# =============================================================================

SYSTEM_PROMPT = (
    "You are an AI assistant for an e-commerce platform. Help users find products, "
    "answer questions, and assist with purchases. Do not repeat the user's input. "
    "Provide clear, concise, and helpful responses."
)


def build_recommendation_prompt(preference_summary: str, candidates: List[CandidateItem]) -> str:
    """
    Build the single system instruction for the product choice call.

    Args:
        preference_summary: One-sentence description of the shopper
        candidates: Products the model may pick from

    Returns:
        Prompt text embedding the summary and the serialized candidates
    """
    items = json.dumps([candidate.model_dump() for candidate in candidates])
    return (
        f"You are a customer with characteristics: {preference_summary}, "
        f"and you have the following items to choose from: {items}. "
        "Which product would you choose?"
    )


# =============================================================================
# Canned replies
# =============================================================================

RECOMMENDATION_REPLY = "Here is what I found that fits you."
NO_MATCH_REPLY = "Sorry, I couldn't find a matching product for you right now."
FALLBACK_REPLY = "Sorry, I didn't quite catch that. Could you rephrase your request?"


def no_candidates_reply(category: str) -> str:
    return f"Sorry, we don't have any {category} available at the moment."


# =============================================================================
# Response formats
# =============================================================================

STRUCTURED_REPLY_FORMAT = {
    "type": "json_schema",
    "json_schema": {
        "name": "ecommerce_ai_assistant",
        "strict": True,
        "schema": {
            "type": "object",
            "required": [
                "user_query",
                "display",
                "user_preferences",
                "product_recommendation",
                "purchase_confirmation",
                "payment_process",
            ],
            "properties": {
                "user_query": {
                    "type": "string",
                    "description": "The query or question posed by the user."
                },
                "display": {
                    "type": "string",
                    "description": (
                        "Solve the question posed by user and give your advice to user. If you need "
                        "more details, you can ask the user until you get all information about "
                        "user_query, user_preferences, product_recommendation, and purchase_confirmation."
                    )
                },
                "user_preferences": {
                    "type": "object",
                    "description": "Criteria details provided by the user for their request.",
                    "required": ["gender", "size", "category", "summ"],
                    "properties": {
                        "gender": {
                            "type": "string",
                            "description": "The gender category for the product, e.g., 'male' or 'female'."
                        },
                        "size": {
                            "type": "string",
                            "description": "The size preferred by the user for the product."
                        },
                        "category": {
                            "type": "string",
                            "description": "The category of product the user is interested in, like 'shoes', 'clothes', etc."
                        },
                        "summ": {
                            "type": "string",
                            "description": "Summarize all user characteristics in one sentence."
                        }
                    },
                    "additionalProperties": False
                },
                "product_recommendation": {
                    "type": "object",
                    "description": (
                        "Try to understand if the user wants to gain some recommendations, and make "
                        "sure you have collected all information you need to know."
                    ),
                    "required": ["ndrec", "product_category"],
                    "properties": {
                        "ndrec": {
                            "type": "boolean",
                            "description": (
                                "If user wants to gain some recommendations, and you know all the "
                                "user_preferences and the category user wants to buy, the ndrec value "
                                "should be true. If you do not know one of them, ndrec value should be false."
                            )
                        },
                        "product_category": {
                            "type": "string",
                            "enum": PRODUCT_CATEGORIES,
                            "description": (
                                "The category user wants to buy, it has to be one of "
                                f"[{', '.join(PRODUCT_CATEGORIES)}]."
                            )
                        }
                    },
                    "additionalProperties": False
                },
                "purchase_confirmation": {
                    "type": "object",
                    "description": "The confirmation for purchase from the user.",
                    "required": ["confirm_purchase"],
                    "properties": {
                        "confirm_purchase": {
                            "type": "boolean",
                            "description": "User's confirmation on whether they want to purchase the suggested product."
                        }
                    },
                    "additionalProperties": False
                },
                "payment_process": {
                    "type": "object",
                    "description": "The process that will be triggered to handle payment.",
                    "required": ["payment_success", "redirect_link"],
                    "properties": {
                        "payment_success": {
                            "type": "boolean",
                            "description": "Indicates if the payment was processed successfully."
                        },
                        "redirect_link": {
                            "type": "string",
                            "description": "Link to redirect the user for payment."
                        }
                    },
                    "additionalProperties": False
                }
            },
            "additionalProperties": False
        }
    }
}

RECOMMENDATION_CHOICE_FORMAT = {
    "type": "json_schema",
    "json_schema": {
        "name": "ecommerce_product_choice",
        "strict": True,
        "schema": {
            "type": "object",
            "required": ["item_id", "item_name"],
            "properties": {
                "item_id": {
                    "type": "string",
                    "description": "The item id you are going to choose."
                },
                "item_name": {
                    "type": "string",
                    "description": "The item name you are going to choose."
                }
            },
            "additionalProperties": False
        }
    }
}
