from telegram import Update
from telegram.ext import CommandHandler, ContextTypes
import logging

from command_handlers.replies import send_replies
from controllers.turn_dispatcher import TurnDispatching

logger = logging.getLogger(__name__)

class StartHandler:
    """Handler for the /start command."""

    def __init__(self, dispatcher: TurnDispatching):
        self.dispatcher = dispatcher

    def get_handler(self) -> CommandHandler:
        """Get the start command handler.

        Returns:
            CommandHandler: The start command handler
        """
        return CommandHandler("start", self._start_command)

    async def _start_command(self, update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
        """Handle the /start command.

        Args:
            update: The update object
            context: The context object
        """
        try:
            logger.info(f"Start command received from user {update.effective_user.id}")
            replies = await self.dispatcher.welcome(
                conversation_id=str(update.effective_chat.id),
                user_id=str(update.effective_user.id),
            )
            await send_replies(update.message, replies)
            logger.info("Start command response sent")
        except Exception as e:
            logger.error(f"Error in start command: {str(e)}", exc_info=True)
            raise
