from telegram import Update
from telegram.ext import ContextTypes, MessageHandler, filters
import logging

from command_handlers.replies import send_replies
from controllers.turn_dispatcher import TurnDispatching, TurnFailedError
from localization import Key
from models.models import OutgoingMessage

logger = logging.getLogger(__name__)

class TurnHandler:
    """
    Routes every plain text message to the turn dispatcher.

    One message is one turn: the dispatcher starts or resumes a flow and the
    messages it returns are sent back in order.
    """

    def __init__(self, dispatcher: TurnDispatching):
        self.dispatcher = dispatcher

    def get_handler(self) -> MessageHandler:
        return MessageHandler(filters.TEXT & ~filters.COMMAND, self._handle_message)

    async def _handle_message(self, update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
        conversation_id = str(update.effective_chat.id)
        user_id = str(update.effective_user.id)
        logger.info(f"Turn received in conversation {conversation_id} from user {user_id}")

        try:
            replies = await self.dispatcher.handle_turn(
                update.message.text,
                conversation_id=conversation_id,
                user_id=user_id,
            )
        except TurnFailedError as e:
            logger.error(f"Turn failed: {str(e)}", exc_info=True)
            replies = [OutgoingMessage(text=Key.turn.failed)]
        except Exception as e:
            logger.error(f"Error handling turn: {str(e)}", exc_info=True)
            raise

        await send_replies(update.message, replies)
