from typing import Any, Dict

from engine.flow_definition import FlowDefinition
from localization import Key
from models.results import End, Prompt, StepResult
from conversations.names import GREETINGS


def ask_name(values: Dict[str, Any], last_input: Any) -> StepResult:
    return Prompt(text=Key.greetings.ask_name)


def ask_workplace(values: Dict[str, Any], name: str) -> StepResult:
    return Prompt(
        text=Key.greetings.ask_workplace,
        say=[Key.greetings.hello.format(name=name)],
        values={"name": name},
    )


def remember_user(values: Dict[str, Any], workplace: str) -> StepResult:
    return End(
        say=[Key.greetings.workplace_reply.format(workplace=workplace)],
        profile={"name": values["name"], "workplace": workplace},
        result=values["name"],
    )


greetings_flow = FlowDefinition.of(GREETINGS, [ask_name, ask_workplace, remember_user])
