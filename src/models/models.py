from typing import Any, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, Field

from models.results import Prompt


class Frame(BaseModel):
    flow: str
    step_index: int = 0
    values: Dict[str, Any] = Field(default_factory=dict)
    pending: Optional[Prompt] = None


class ConversationRecord(BaseModel):
    flow_stack: List[Frame] = Field(default_factory=list)
    data: Dict[str, Any] = Field(default_factory=dict)

    @property
    def active_frame(self) -> Optional[Frame]:
        """Top of the stack, or None when the conversation is idle."""
        if self.flow_stack:
            return self.flow_stack[-1]
        return None


class UserProfile(BaseModel):
    name: Optional[str] = None
    workplace: Optional[str] = None


class UserRecord(BaseModel):
    profile: UserProfile = Field(default_factory=UserProfile)


class OutgoingMessage(BaseModel):
    text: str
    choices: List[str] = Field(default_factory=list)


class IntentMatch(BaseModel):
    kind: Literal["match"] = "match"
    keyword: str
    flow: str


class NoMatch(BaseModel):
    kind: Literal["no_match"] = "no_match"


Intent = Union[IntentMatch, NoMatch]
