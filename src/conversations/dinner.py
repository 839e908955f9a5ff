from typing import Any, Dict, List

from pydantic import BaseModel, Field

from engine.flow_definition import FlowDefinition
from engine.interrupts import InterruptTable
from localization import Key
from models.enums import InputKind
from models.results import End, Prompt, Push, Replace, StepResult
from conversations.names import ORDER_DINNER, ORDER_FLOW


class MenuItem(BaseModel):
    description: str
    price: float


class Cart(BaseModel):
    orders: List[MenuItem] = Field(default_factory=list)
    total: float = 0

    def add(self, item: MenuItem) -> None:
        self.orders.append(item)
        self.total = round(self.total + item.price, 2)


DINNER_MENU: Dict[str, MenuItem] = {
    "Potato Salad - $5.99": MenuItem(description="Potato Salad", price=5.99),
    "Tuna Sandwich - $6.89": MenuItem(description="Tuna Sandwich", price=6.89),
    "Clam Chowder - $4.50": MenuItem(description="Clam Chowder", price=4.50),
}

PROCESS_ORDER = "Process order"
CANCEL = "Cancel"
MORE_INFO = "More info"
HELP = "Help"

ORDER_CHOICES = [*DINNER_MENU, PROCESS_ORDER, CANCEL, MORE_INFO, HELP]

# returned by the order flow when the guest cancels
ORDER_CANCELLED = "cancelled"

order_interrupts = InterruptTable({
    MORE_INFO: Key.order.more_info,
    HELP: Key.order.help,
})


def welcome_diner(values: Dict[str, Any], last_input: Any) -> StepResult:
    return Push(flow=ORDER_FLOW, say=[Key.dinner.welcome])


def ask_room_number(values: Dict[str, Any], order: Any) -> StepResult:
    if order == ORDER_CANCELLED:
        return End(result=ORDER_CANCELLED)
    return Prompt(
        text=Key.dinner.ask_room,
        expects=InputKind.NUMBER,
        retry_text=Key.dinner.room_retry,
        values={"order": order},
    )


def confirm_delivery(values: Dict[str, Any], room: int) -> StepResult:
    return End(
        say=[Key.dinner.delivery.format(room=room)],
        result={"room": room, "order": values.get("order")},
    )


def take_order(values: Dict[str, Any], last_input: Any) -> StepResult:
    cart = Cart.model_validate(values.get("cart") or {})
    return Prompt(
        text=Key.order.ask,
        expects=InputKind.CHOICE,
        choices=ORDER_CHOICES,
        retry_text=Key.order.invalid_item,
        values={"cart": cart.model_dump()},
    )


def handle_order_choice(values: Dict[str, Any], choice: str) -> StepResult:
    interrupt = order_interrupts.handle(ORDER_FLOW, choice, values)
    if interrupt is not None:
        return interrupt

    cart = Cart.model_validate(values["cart"])

    if choice == PROCESS_ORDER:
        if not cart.orders:
            return Replace(flow=ORDER_FLOW, say=[Key.order.empty_cart])
        return End(say=[Key.order.processing], result=cart.model_dump())

    if choice == CANCEL:
        return End(say=[Key.order.cancelled], result=ORDER_CANCELLED)

    item = DINNER_MENU[choice]
    cart.add(item)
    return Replace(
        flow=ORDER_FLOW,
        seed={"cart": cart.model_dump()},
        say=[Key.order.added.format(item=choice, total=cart.total)],
    )


order_dinner_flow = FlowDefinition.of(
    ORDER_DINNER,
    [welcome_diner, ask_room_number, confirm_delivery],
    calls=[ORDER_FLOW],
)

order_flow = FlowDefinition.of(
    ORDER_FLOW,
    [take_order, handle_order_choice],
    calls=[ORDER_FLOW],
)
