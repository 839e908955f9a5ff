"""
Conversation flows of the concierge bot.

Each module defines one or more flows; build_registry() registers all of
them and INTENTS maps the top-level keywords to the flows they start.
"""
from engine.flow_definition import FlowRegistry
from conversations.dinner import order_dinner_flow, order_flow
from conversations.greetings import greetings_flow
from conversations.main_menu import main_menu_flow
from conversations.names import GREETINGS, MAIN_MENU, ORDER_DINNER, RESERVE_TABLE
from conversations.reservation import reserve_table_flow

INTENTS = {
    "hello": GREETINGS,
    "menu": MAIN_MENU,
    "order dinner": ORDER_DINNER,
    "reserve table": RESERVE_TABLE,
}


def build_registry() -> FlowRegistry:
    registry = FlowRegistry()
    for definition in (greetings_flow, main_menu_flow, order_dinner_flow, order_flow, reserve_table_flow):
        registry.register(definition)
    registry.validate()
    return registry
