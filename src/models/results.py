from typing import Annotated, Any, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, Field

from models.enums import InputKind


class StepOutcome(BaseModel):
    """
    Common fields of every step result.

    Attributes:
        say: messages sent before the result is acted on
        values: updates merged into the executing frame's values
        conversation: updates merged into the conversation data
        profile: updates merged into the user's profile
    """

    say: List[str] = Field(default_factory=list)
    values: Dict[str, Any] = Field(default_factory=dict)
    conversation: Dict[str, Any] = Field(default_factory=dict)
    profile: Dict[str, Any] = Field(default_factory=dict)


class Prompt(StepOutcome):
    kind: Literal["prompt"] = "prompt"
    text: str
    expects: InputKind = InputKind.TEXT
    choices: List[str] = Field(default_factory=list)
    retry_text: Optional[str] = None


class Push(StepOutcome):
    kind: Literal["push"] = "push"
    flow: str
    seed: Optional[Dict[str, Any]] = None


class Replace(StepOutcome):
    kind: Literal["replace"] = "replace"
    flow: str
    seed: Optional[Dict[str, Any]] = None


class End(StepOutcome):
    kind: Literal["end"] = "end"
    result: Any = None


class Repeat(StepOutcome):
    kind: Literal["repeat"] = "repeat"


StepResult = Annotated[
    Union[Prompt, Push, Replace, End, Repeat],
    Field(discriminator="kind"),
]
