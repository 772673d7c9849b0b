"""
Shopping Assistant - Chat Orchestrator

Handles one user message at a time:
1. Validates the message and user id
2. Appends the message to the user's conversation
3. Asks the model for a structured reply over the whole conversation
4. Either returns the reply text, or runs the recommendation sub-flow
   when the model says it knows enough to recommend

Turns for the same user are serialized; different users run concurrently.
"""

from dataclasses import dataclass
from typing import Optional

from shop_assistant.catalog import CatalogGateway
from shop_assistant.conversation_store import ActiveConversation, ConversationStore
from shop_assistant.errors import InputValidationError
from shop_assistant.interpreter import interpret_reply
from shop_assistant.logger import get_logger
from shop_assistant.models import ChatResponse, StructuredReply, Turn
from shop_assistant.oracle import ModelOracle
from shop_assistant.prompts import (
    FALLBACK_REPLY,
    NO_MATCH_REPLY,
    RECOMMENDATION_REPLY,
    STRUCTURED_REPLY_FORMAT,
    no_candidates_reply,
)
from shop_assistant.recommender import RecommendationFlow, RecommendationOutcome, RecommendationStatus

logger = get_logger("orchestrator")


@dataclass
class TurnResult:
    """
    Everything one chat turn produced.

    ``structured`` is None when the model output could not be decoded;
    ``recommendation`` is None unless the sub-flow ran.
    """
    response: ChatResponse
    structured: Optional[StructuredReply] = None
    recommendation: Optional[RecommendationOutcome] = None


class ShoppingAssistant:
    """
    Conversational shopping assistant.

    Collaborators are injectable; defaults talk to the configured model
    endpoint and the SQLite catalog.
    """

    def __init__(
        self,
        oracle: Optional[ModelOracle] = None,
        catalog: Optional[CatalogGateway] = None,
        store: Optional[ConversationStore] = None,
        recommender: Optional[RecommendationFlow] = None
    ):
        self.oracle = oracle if oracle is not None else ModelOracle()
        self.catalog = catalog if catalog is not None else CatalogGateway()
        self.store = store if store is not None else ConversationStore()
        if recommender is None:
            recommender = RecommendationFlow(self.oracle, self.catalog)
        self.recommender = recommender

    def chat(self, message: Optional[str], user_id: Optional[str]) -> ChatResponse:
        """
        Process a user message and return the reply and any recommendation.

        Args:
            message: The user's input message
            user_id: Opaque identifier of the user's conversation

        Returns:
            ChatResponse with reply text and an optional product

        Raises:
            InputValidationError: message or user_id missing
            ModelInvocationError: the primary model call failed
        """
        return self.respond(message, user_id).response

    def respond(self, message: Optional[str], user_id: Optional[str]) -> TurnResult:
        """Same as chat(), also returning the decoded reply and sub-flow outcome."""
        if not isinstance(message, str) or not message.strip():
            raise InputValidationError("Message and userId are required.")
        if not isinstance(user_id, str) or not user_id.strip():
            raise InputValidationError("Message and userId are required.")

        user_id = user_id.strip()
        logger.info(f"Chat message from {user_id} ({len(message)} chars)")
        with self.store.turn(user_id) as conversation:
            return self._run_turn(message, conversation)

    def _run_turn(self, message: str, conversation: ActiveConversation) -> TurnResult:
        # The user turn is kept even if the model call below fails
        conversation.append(Turn(role="user", content=message))
        history = conversation.history()

        raw = self.oracle.complete(
            [turn.to_message() for turn in history],
            STRUCTURED_REPLY_FORMAT
        )

        decoded = interpret_reply(raw)
        if not decoded.ok:
            logger.warning(f"Unusable reply for {conversation.user_id}: {decoded.error}")
            return TurnResult(ChatResponse(reply=FALLBACK_REPLY))

        structured: StructuredReply = decoded.value
        conversation.append(Turn(role="assistant", content=structured.display))

        if not structured.wants_recommendation:
            return TurnResult(ChatResponse(reply=structured.display), structured)

        outcome = self.recommender.recommend(
            structured.product_recommendation.product_category,
            structured.user_preferences.summ
        )
        return TurnResult(self._recommendation_response(outcome), structured, outcome)

    def _recommendation_response(self, outcome: RecommendationOutcome) -> ChatResponse:
        if outcome.found:
            return ChatResponse(reply=RECOMMENDATION_REPLY, recommendation=outcome.product)
        if outcome.status == RecommendationStatus.NO_CANDIDATES:
            return ChatResponse(reply=no_candidates_reply(outcome.category))
        return ChatResponse(reply=NO_MATCH_REPLY)

    def reset_conversation(self, user_id: str):
        """Reset a user's conversation history."""
        self.store.reset(user_id)


# =============================================================================
# CLI Interface
# =============================================================================

CLI_USER_ID = "cli-user"


def run_cli():
    """Run the assistant in command-line interface mode."""
    print("=" * 60)
    print("Welcome to the Shopping Assistant!")
    print("=" * 60)
    print("\nTell me what you are looking for and I'll find something that fits.")
    print("Type 'quit' or 'exit' to end the conversation.")
    print("Type 'reset' to start a new conversation.")
    print("-" * 60)

    try:
        assistant = ShoppingAssistant()
    except Exception as e:
        print(f"\nError initializing assistant: {e}")
        print("Make sure you have set up your environment variables correctly.")
        return

    while True:
        try:
            user_input = input("\nYou: ").strip()

            if not user_input:
                continue

            if user_input.lower() in ['quit', 'exit']:
                print("\nThank you for shopping with us! Goodbye!")
                break

            if user_input.lower() == 'reset':
                assistant.reset_conversation(CLI_USER_ID)
                print("\nConversation reset. How can I help you?")
                continue

            response = assistant.chat(user_input, CLI_USER_ID)
            print(f"\nAssistant: {response.reply}")

            product = response.recommendation
            if product:
                print(f"  -> {product.name} (${product.price:.2f})")
                print(f"     {product.image}")

        except KeyboardInterrupt:
            print("\n\nThank you for shopping with us! Goodbye!")
            break
        except Exception as e:
            print(f"\nError: {e}")
            print("Please try again.")


if __name__ == "__main__":
    run_cli()
