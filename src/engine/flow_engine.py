import copy
import logging
from typing import Any, Dict, List, Optional

from engine.errors import FlowDefinitionError, FlowExecutionError
from engine.flow_definition import FlowRegistry
from engine.prompts import recognize
from localization import Key
from models.models import ConversationRecord, Frame, OutgoingMessage
from models.results import End, Prompt, Push, Repeat, Replace, StepOutcome

logger = logging.getLogger(__name__)

DEFAULT_MAX_STEPS = 100


class FlowEngine:
    """
    Runs the stack of flows of a single conversation for a single turn.

    The engine works on the conversation record it is given. Messages emitted
    while running steps are collected in ``outbox``; profile updates requested
    by steps are collected in ``profile_updates``. Persisting either is the
    caller's job.

    Execution model:
    1. A frame runs steps until one of them prompts for input
    2. Push/Replace/End/Repeat are acted on synchronously, without new input
    3. The next inbound text is delivered through ``resume``
    """

    def __init__(self, registry: FlowRegistry, record: ConversationRecord, max_steps: int = DEFAULT_MAX_STEPS):
        self.registry = registry
        self.record = record
        self.max_steps = max_steps
        self.outbox: List[OutgoingMessage] = []
        self.profile_updates: Dict[str, Any] = {}

    @property
    def stack(self) -> List[Frame]:
        return self.record.flow_stack

    @property
    def depth(self) -> int:
        return len(self.stack)

    @property
    def is_active(self) -> bool:
        return bool(self.stack)

    @property
    def active_frame(self) -> Optional[Frame]:
        return self.record.active_frame

    def say(self, text: str) -> None:
        self.outbox.append(OutgoingMessage(text=text))

    def push(self, flow_name: str, seed: Optional[Dict[str, Any]] = None) -> None:
        """Start a flow on top of the stack and run it until it waits for input."""
        self._push_frame(flow_name, seed)
        self._run(None)

    def resume(self, text: str) -> None:
        """Deliver user text to the prompt the active frame is waiting on."""
        frame = self.active_frame
        if frame is None:
            raise FlowExecutionError("Cannot resume: no flow is active")
        if frame.pending is None:
            raise FlowExecutionError(f"Cannot resume flow '{frame.flow}': it is not waiting for input")

        accepted, value = recognize(frame.pending, text)
        if not accepted:
            logger.debug(f"Input rejected by {frame.flow} prompt at step {frame.step_index}")
            self.say(frame.pending.retry_text or Key.prompt.retry)
            self._ask(frame.pending)
            return

        self._run(value)

    def replace(self, flow_name: str, seed: Optional[Dict[str, Any]] = None) -> None:
        if not self.stack:
            raise FlowExecutionError("Cannot replace: no flow is active")
        self.stack.pop()
        self._push_frame(flow_name, seed)
        self._run(None)

    def end(self, result: Any = None) -> None:
        if not self.stack:
            raise FlowExecutionError("Cannot end: no flow is active")
        finished = self.stack.pop()
        logger.debug(f"Ended flow {finished.flow}")
        if self.stack:
            self._run(result)

    def cancel_all(self) -> None:
        logger.info(f"Cancelling {self.depth} active flow(s)")
        self.stack.clear()

    def _push_frame(self, flow_name: str, seed: Optional[Dict[str, Any]]) -> Frame:
        # lookup fails fast on an unregistered name
        self.registry.get(flow_name)
        frame = Frame(flow=flow_name, values=copy.deepcopy(seed) if seed else {})
        self.stack.append(frame)
        logger.debug(f"Pushed flow {flow_name} at depth {self.depth}")
        return frame

    def _run(self, last_input: Any) -> None:
        executed = 0
        while self.stack:
            if executed >= self.max_steps:
                raise FlowExecutionError(
                    f"Exceeded {self.max_steps} steps in one turn; flow '{self.stack[-1].flow}' never waits for input"
                )
            executed += 1

            frame = self.stack[-1]
            definition = self.registry.get(frame.flow)

            if frame.step_index >= len(definition.steps):
                outcome = End()
            else:
                step = definition.steps[frame.step_index]
                frame.step_index += 1
                outcome = step(copy.deepcopy(frame.values), last_input)

            self._apply_effects(frame, outcome)

            if isinstance(outcome, Prompt):
                frame.pending = outcome
                self._ask(outcome)
                return

            if isinstance(outcome, Repeat):
                if frame.pending is None:
                    raise FlowDefinitionError(
                        f"Flow '{frame.flow}' repeated step {frame.step_index - 1} without a pending prompt"
                    )
                frame.step_index -= 1
                self._ask(frame.pending)
                return

            frame.pending = None
            last_input = None

            if isinstance(outcome, Push):
                self._push_frame(outcome.flow, outcome.seed)
            elif isinstance(outcome, Replace):
                self.stack.pop()
                self._push_frame(outcome.flow, outcome.seed)
            elif isinstance(outcome, End):
                self.stack.pop()
                logger.debug(f"Flow {frame.flow} ended, depth now {self.depth}")
                last_input = outcome.result

    def _apply_effects(self, frame: Frame, outcome: StepOutcome) -> None:
        for text in outcome.say:
            self.say(text)
        frame.values.update(outcome.values)
        self.record.data.update(outcome.conversation)
        self.profile_updates.update(outcome.profile)

    def _ask(self, prompt: Prompt) -> None:
        self.outbox.append(OutgoingMessage(text=prompt.text, choices=list(prompt.choices)))
