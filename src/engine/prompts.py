import re
from typing import Any, Optional, Tuple

from models.enums import InputKind
from models.results import Prompt

_NUMBER = re.compile(r"-?\d+")
_DIGIT = re.compile(r"\d")


def recognize(prompt: Prompt, text: Optional[str]) -> Tuple[bool, Any]:
    """
    Recognize raw user text against the kind of input a prompt expects.

    Returns:
        (True, value) when the text is acceptable, (False, None) otherwise.
        Choice prompts yield the canonical choice string.
    """
    cleaned = (text or "").strip()
    if not cleaned:
        return False, None

    if prompt.expects == InputKind.NUMBER:
        match = _NUMBER.search(cleaned)
        if not match:
            return False, None
        return True, int(match.group())

    if prompt.expects == InputKind.DATETIME:
        if not _DIGIT.search(cleaned):
            return False, None
        return True, cleaned

    if prompt.expects == InputKind.CHOICE:
        choice = match_choice(cleaned, prompt.choices)
        return choice is not None, choice

    return True, cleaned


def match_choice(text: str, choices) -> Optional[str]:
    lowered = text.strip().lower()
    for choice in choices:
        if choice.lower() == lowered:
            return choice

    # "tuna sandwich" picks "Tuna Sandwich - $6.89", but only when unambiguous
    candidates = [choice for choice in choices if choice.lower().startswith(lowered)]
    if len(candidates) == 1:
        return candidates[0]
    return None
