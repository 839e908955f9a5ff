from telegram import Update
from telegram.ext import CommandHandler, ContextTypes
import logging

from command_handlers.replies import send_replies
from controllers.turn_dispatcher import TurnDispatching

logger = logging.getLogger(__name__)

class CancelHandler:
    """Handler for the /cancel command."""

    def __init__(self, dispatcher: TurnDispatching):
        self.dispatcher = dispatcher

    def get_handler(self) -> CommandHandler:
        """Get the cancel command handler.

        Returns:
            CommandHandler: The cancel command handler
        """
        return CommandHandler("cancel", self._cancel_command)

    async def _cancel_command(self, update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
        """Handle the /cancel command by clearing every active flow.

        Args:
            update: The update object
            context: The context object
        """
        try:
            logger.info(f"Cancel command received from user {update.effective_user.id}")
            replies = await self.dispatcher.cancel(conversation_id=str(update.effective_chat.id))
            await send_replies(update.message, replies)
            logger.info("Cancel command response sent")
        except Exception as e:
            logger.error(f"Error in cancel command: {str(e)}", exc_info=True)
            raise
