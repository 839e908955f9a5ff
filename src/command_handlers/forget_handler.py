from telegram import Update
from telegram.ext import CommandHandler, ContextTypes
import logging

from command_handlers.replies import send_replies
from controllers.turn_dispatcher import TurnDispatching

logger = logging.getLogger(__name__)

class ForgetHandler:
    """Handler for the /forget command."""

    def __init__(self, dispatcher: TurnDispatching):
        self.dispatcher = dispatcher

    def get_handler(self) -> CommandHandler:
        return CommandHandler("forget", self._forget_command)

    async def _forget_command(self, update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
        """Delete the stored profile of the user who sent the command."""
        try:
            logger.info(f"Forget command received from user {update.effective_user.id}")
            replies = await self.dispatcher.forget_user(user_id=str(update.effective_user.id))
            await send_replies(update.message, replies)
        except Exception as e:
            logger.error(f"Error in forget command: {str(e)}", exc_info=True)
            raise
