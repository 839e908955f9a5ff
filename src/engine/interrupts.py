from typing import Any, Dict, Optional

from models.results import Replace


class InterruptTable:
    """
    Keywords that may interrupt an input-handling step.

    Handling an interrupt sends its informational text and re-enters the same
    flow with the accumulated values as seed, so nothing collected so far is
    lost and the stack does not grow.
    """

    def __init__(self, entries: Dict[str, str]):
        self._entries = {keyword.lower(): text for keyword, text in entries.items()}

    def handle(self, flow_name: str, choice: Optional[str], values: Dict[str, Any]) -> Optional[Replace]:
        if choice is None:
            return None
        text = self._entries.get(choice.strip().lower())
        if text is None:
            return None
        return Replace(flow=flow_name, seed=dict(values), say=[text])

    def __contains__(self, keyword: str) -> bool:
        return keyword.lower() in self._entries
