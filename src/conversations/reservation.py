from typing import Any, Dict

from pydantic import BaseModel

from engine.flow_definition import FlowDefinition
from localization import Key
from models.enums import InputKind
from models.results import End, Prompt, Repeat, StepResult
from conversations.names import RESERVE_TABLE


class Reservation(BaseModel):
    date_time: str
    party_size: int
    name: str


def ask_date_time(values: Dict[str, Any], last_input: Any) -> StepResult:
    return Prompt(
        say=[Key.reservation.welcome],
        text=Key.reservation.ask_datetime,
        expects=InputKind.DATETIME,
        retry_text=Key.reservation.datetime_retry,
    )


def ask_party_size(values: Dict[str, Any], date_time: str) -> StepResult:
    return Prompt(
        text=Key.reservation.ask_party_size,
        expects=InputKind.NUMBER,
        retry_text=Key.reservation.party_size_retry,
        values={"date_time": date_time},
    )


def ask_reservation_name(values: Dict[str, Any], party_size: int) -> StepResult:
    if party_size < 1:
        return Repeat(say=[Key.reservation.party_size_retry])
    return Prompt(text=Key.reservation.ask_name, values={"party_size": party_size})


def confirm_reservation(values: Dict[str, Any], name: str) -> StepResult:
    reservation = Reservation(date_time=values["date_time"], party_size=values["party_size"], name=name)
    return End(
        say=[Key.reservation.confirmed.format(
            date_time=reservation.date_time,
            party_size=reservation.party_size,
            name=reservation.name,
        )],
        conversation={"reservation": reservation.model_dump()},
        result=reservation.model_dump(),
    )


reserve_table_flow = FlowDefinition.of(
    RESERVE_TABLE,
    [ask_date_time, ask_party_size, ask_reservation_name, confirm_reservation],
)
