"""
Recommendation sub-flow.

Given a category and a one-sentence shopper summary, offers the model the
category's products as (id, name) candidates, lets it pick exactly one,
and resolves the pick back to a catalog product. The model's choice is
final; no ranking happens here.
"""

from dataclasses import dataclass
from enum import Enum
from typing import List, Optional

from shop_assistant.catalog import CatalogGateway
from shop_assistant.errors import ModelInvocationError
from shop_assistant.interpreter import interpret_choice
from shop_assistant.logger import get_logger
from shop_assistant.models import CandidateItem, ProductSummary, RecommendationChoice
from shop_assistant.oracle import ModelOracle
from shop_assistant.prompts import RECOMMENDATION_CHOICE_FORMAT, build_recommendation_prompt

logger = get_logger("recommender")


class RecommendationStatus(str, Enum):
    """How a recommendation attempt ended."""
    FOUND = "found"
    NO_CANDIDATES = "no_candidates"
    NOT_FOUND = "not_found"
    UNDECODABLE = "undecodable"
    FAILED = "failed"


@dataclass
class RecommendationOutcome:
    status: RecommendationStatus
    category: str
    product: Optional[ProductSummary] = None
    choice: Optional[RecommendationChoice] = None
    detail: Optional[str] = None

    @property
    def found(self) -> bool:
        return self.status == RecommendationStatus.FOUND


class RecommendationFlow:
    """Second, independent model call choosing one product from a category."""

    def __init__(self, oracle: ModelOracle, catalog: CatalogGateway):
        self.oracle = oracle
        self.catalog = catalog

    def build_candidates(self, category: str) -> List[CandidateItem]:
        """Project every product of a category to an (id, name) pair."""
        return [
            CandidateItem(id=summary.id, name=summary.name)
            for summary in self.catalog.find_by_category(category)
        ]

    def recommend(self, category: str, preference_summary: str) -> RecommendationOutcome:
        """
        Pick and resolve one product for the shopper.

        Args:
            category: Category the shopper wants to buy in
            preference_summary: Free-form description of the shopper

        Returns:
            RecommendationOutcome; only FOUND carries a product
        """
        candidates = self.build_candidates(category)
        if not candidates:
            logger.info(f"No candidates in category '{category}'")
            return RecommendationOutcome(RecommendationStatus.NO_CANDIDATES, category)

        messages = [{
            "role": "system",
            "content": build_recommendation_prompt(preference_summary, candidates)
        }]
        try:
            raw = self.oracle.complete(messages, RECOMMENDATION_CHOICE_FORMAT)
        except ModelInvocationError as e:
            logger.error(f"Recommendation call failed for '{category}': {e}", exc_info=True)
            return RecommendationOutcome(RecommendationStatus.FAILED, category, detail=str(e))

        decoded = interpret_choice(raw)
        if not decoded.ok:
            logger.warning(f"Could not decode recommendation choice: {decoded.error}")
            return RecommendationOutcome(RecommendationStatus.UNDECODABLE, category, detail=decoded.error)

        choice: RecommendationChoice = decoded.value
        offered = {candidate.id for candidate in candidates}
        if choice.item_id not in offered:
            logger.warning(f"Model chose {choice.item_id}, which was not offered for '{category}'")
            return RecommendationOutcome(RecommendationStatus.NOT_FOUND, category, choice=choice)

        product = self.catalog.find_by_id(choice.item_id)
        if product is None:
            return RecommendationOutcome(RecommendationStatus.NOT_FOUND, category, choice=choice)

        logger.info(f"Recommended {product.id} in '{category}'")
        return RecommendationOutcome(RecommendationStatus.FOUND, category, product=product, choice=choice)
