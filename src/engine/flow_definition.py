import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterable, Sequence, Tuple

from engine.errors import FlowDefinitionError, FlowNotFoundError
from models.results import StepResult

logger = logging.getLogger(__name__)

Step = Callable[[Dict[str, Any], Any], StepResult]


@dataclass(frozen=True)
class FlowDefinition:
    """
    A named, ordered sequence of steps.

    Each step receives a copy of the frame's accumulated values and the last
    input delivered to the frame, and returns exactly one step result.

    Attributes:
        name: name the flow is registered and pushed under
        steps: the steps, run in order
        calls: names of other flows this flow may push or replace itself with
    """

    name: str
    steps: Tuple[Step, ...]
    calls: Tuple[str, ...] = field(default_factory=tuple)

    @classmethod
    def of(cls, name: str, steps: Sequence[Step], calls: Iterable[str] = ()) -> "FlowDefinition":
        return cls(name=name, steps=tuple(steps), calls=tuple(calls))


class FlowRegistry:
    """Holds flow definitions by name."""

    def __init__(self):
        self._flows: Dict[str, FlowDefinition] = {}

    def register(self, definition: FlowDefinition) -> FlowDefinition:
        if not definition.name:
            raise FlowDefinitionError("Flow name must not be empty")
        if not definition.steps:
            raise FlowDefinitionError(f"Flow '{definition.name}' has no steps")
        if definition.name in self._flows:
            raise FlowDefinitionError(f"Flow '{definition.name}' is already registered")

        self._flows[definition.name] = definition
        logger.debug(f"Registered flow {definition.name} with {len(definition.steps)} steps")
        return definition

    def get(self, name: str) -> FlowDefinition:
        definition = self._flows.get(name)
        if definition is None:
            raise FlowNotFoundError(name)
        return definition

    def validate(self) -> None:
        """Check that every flow a definition calls is registered."""
        for definition in self._flows.values():
            for target in definition.calls:
                if target not in self._flows:
                    raise FlowNotFoundError(target)

    def __contains__(self, name: str) -> bool:
        return name in self._flows

    @property
    def names(self) -> Tuple[str, ...]:
        return tuple(self._flows)
