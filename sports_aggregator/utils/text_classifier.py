"""Keyword heuristics for sport, category and tag extraction.

These are approximations for providers that do not tag their content.
They match lower-cased substrings, so "signing" also counts as "sign".
"""

from typing import List, Optional

from ..models import SportId


BASKETBALL_KEYWORDS = ("nba", "basketball", "lakers", "warriors", "celtics")
FOOTBALL_KEYWORDS = ("nfl", "chiefs", "bills", "packers")
SOCCER_KEYWORDS = (
    "soccer",
    "premier league",
    "la liga",
    "champions league",
    "manchester",
    "liverpool",
    "barcelona",
    "real madrid",
)

# Checked in order; first hit wins
CATEGORY_RULES = (
    ("trade", ("trade",)),
    ("injury", ("injury",)),
    ("draft", ("draft",)),
    ("contract", ("contract", "sign")),
    ("transfer", ("transfer",)),
    ("breaking", ("breaking",)),
)
DEFAULT_CATEGORY = "general"

TAG_VOCABULARY = (
    "trade",
    "injury",
    "draft",
    "playoff",
    "championship",
    "transfer",
    "contract",
    "signing",
    "rumor",
    "breaking",
)


def _join(*parts: Optional[str]) -> str:
    return " ".join(part for part in parts if part).lower()


def detect_sport(*texts: Optional[str]) -> SportId:
    """Guess the sport of a piece of text. Defaults to basketball."""
    text = _join(*texts)

    if any(keyword in text for keyword in BASKETBALL_KEYWORDS):
        return SportId.BASKETBALL

    if any(keyword in text for keyword in FOOTBALL_KEYWORDS) or (
        "football" in text and "soccer" not in text
    ):
        return SportId.FOOTBALL

    if any(keyword in text for keyword in SOCCER_KEYWORDS):
        return SportId.SOCCER

    return SportId.BASKETBALL


def extract_category(title: Optional[str], description: Optional[str] = None) -> str:
    text = _join(title, description)
    for category, keywords in CATEGORY_RULES:
        if any(keyword in text for keyword in keywords):
            return category
    return DEFAULT_CATEGORY


def extract_tags(title: Optional[str], description: Optional[str] = None) -> List[str]:
    text = _join(title, description)
    return [tag for tag in TAG_VOCABULARY if tag in text]
