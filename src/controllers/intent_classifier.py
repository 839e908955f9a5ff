import re
from typing import Dict, List, Tuple

from models.models import Intent, IntentMatch, NoMatch


class IntentClassifier:
    """Maps top-level keywords to the flows they start."""

    def __init__(self, intents: Dict[str, str]):
        self._intents: List[Tuple[str, str, re.Pattern]] = [
            (keyword, flow, re.compile(rf"\b{re.escape(keyword)}\b", re.IGNORECASE))
            for keyword, flow in intents.items()
        ]

    @property
    def keywords(self) -> List[str]:
        return [keyword for keyword, _, _ in self._intents]

    @property
    def flows(self) -> List[str]:
        return [flow for _, flow, _ in self._intents]

    def classify(self, text: str) -> Intent:
        """Return the first registered intent whose keyword appears in text."""
        for keyword, flow, pattern in self._intents:
            if text and pattern.search(text):
                return IntentMatch(keyword=keyword, flow=flow)
        return NoMatch()
