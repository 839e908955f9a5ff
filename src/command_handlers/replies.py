from typing import List, Optional

from telegram import Message, ReplyKeyboardMarkup

from models.models import OutgoingMessage


def choices_keyboard(choices: List[str]) -> Optional[ReplyKeyboardMarkup]:
    """One button per row; the keyboard hides itself once a choice is tapped."""
    if not choices:
        return None
    return ReplyKeyboardMarkup(
        [[choice] for choice in choices],
        one_time_keyboard=True,
        resize_keyboard=True,
    )


async def send_replies(message: Message, outgoing: List[OutgoingMessage]) -> None:
    """Send the messages of a turn in the order they were emitted."""
    for reply in outgoing:
        await message.reply_text(reply.text, reply_markup=choices_keyboard(reply.choices))
