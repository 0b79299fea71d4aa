"""Keyword-based transaction categorization"""

import math
from typing import Dict, List

from finsight.domain.exceptions import InvalidParameterError
from finsight.domain.models import Categorization

# Checked in declaration order; the first category with a matching keyword wins
CATEGORY_KEYWORDS: Dict[str, List[str]] = {
    "Food & Dining": ["restaurant", "food", "cafe", "pizza", "burger", "starbucks", "mcdonald", "subway", "grocery"],
    "Transportation": ["gas", "fuel", "uber", "lyft", "taxi", "parking", "metro", "bus"],
    "Shopping": ["amazon", "walmart", "target", "mall", "store", "shop"],
    "Entertainment": ["netflix", "spotify", "movie", "theater", "game", "concert"],
    "Bills & Utilities": ["electric", "water", "internet", "phone", "rent", "mortgage"],
    "Healthcare": ["pharmacy", "doctor", "hospital", "medical", "health", "dental"],
    "Travel": ["hotel", "flight", "airbnb", "booking", "expedia"],
    "Education": ["school", "university", "course", "book", "tuition"],
}

CATEGORY_TAGS: Dict[str, List[str]] = {
    "Food & Dining": ["meal", "dining", "takeout"],
    "Transportation": ["commute", "travel", "vehicle"],
    "Shopping": ["retail", "purchase", "goods"],
    "Entertainment": ["leisure", "fun", "subscription"],
    "Bills & Utilities": ["monthly", "recurring", "essential"],
    "Healthcare": ["medical", "wellness", "insurance"],
    "Travel": ["vacation", "trip", "accommodation"],
    "Education": ["learning", "development", "academic"],
}

KEYWORD_CONFIDENCE = 0.85
LARGE_AMOUNT = 1000.0
SMALL_AMOUNT = 10.0


def categorize_transaction(description: str, amount: float) -> Categorization:
    """
    Guess a category from the description, falling back to amount heuristics.

    Fallbacks when no keyword matches:
    - amount > 1000 -> Bills & Utilities (0.6)
    - amount < 10   -> Food & Dining (0.5)
    - otherwise     -> Other (0.3)
    """
    if not isinstance(description, str):
        raise InvalidParameterError(f"Description must be a string, got {description!r}")
    if isinstance(amount, bool) or not isinstance(amount, (int, float)) or not math.isfinite(amount):
        raise InvalidParameterError(f"Amount must be a finite number, got {amount!r}")

    lowered = description.lower()
    for category, keywords in CATEGORY_KEYWORDS.items():
        if any(keyword in lowered for keyword in keywords):
            return Categorization(
                category=category,
                confidence=KEYWORD_CONFIDENCE,
                tags=list(CATEGORY_TAGS.get(category, ["general"])),
            )

    if amount > LARGE_AMOUNT:
        return Categorization(category="Bills & Utilities", confidence=0.6)
    if amount < SMALL_AMOUNT:
        return Categorization(category="Food & Dining", confidence=0.5)
    return Categorization(category="Other", confidence=0.3)
