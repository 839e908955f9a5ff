from typing import Any, Dict

from engine.flow_definition import FlowDefinition
from localization import Key
from models.enums import InputKind
from models.results import Prompt, Push, Replace, StepResult
from conversations.names import MAIN_MENU, ORDER_DINNER, RESERVE_TABLE


def offer_services(values: Dict[str, Any], last_input: Any) -> StepResult:
    return Prompt(
        say=[Key.menu.welcome],
        text=Key.menu.ask,
        expects=InputKind.CHOICE,
        choices=[Key.menu.order_dinner, Key.menu.reserve_table],
    )


def route_choice(values: Dict[str, Any], choice: str) -> StepResult:
    if choice == Key.menu.order_dinner:
        return Push(flow=ORDER_DINNER)
    if choice == Key.menu.reserve_table:
        return Push(flow=RESERVE_TABLE)
    return Replace(flow=MAIN_MENU)


def start_over(values: Dict[str, Any], last_input: Any) -> StepResult:
    # the service that was picked has finished
    return Replace(flow=MAIN_MENU)


main_menu_flow = FlowDefinition.of(
    MAIN_MENU,
    [offer_services, route_choice, start_over],
    calls=[MAIN_MENU, ORDER_DINNER, RESERVE_TABLE],
)
