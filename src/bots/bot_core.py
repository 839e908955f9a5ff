from telegram import BotCommand
from telegram.ext import Application
import logging

logger = logging.getLogger(__name__)

class BotCore:
    """
    Core bot implementation with common functionality.

    This class handles:
    1. Application setup
    2. Registration of the command menu
    3. Polling lifecycle
    """

    def __init__(self, token: str):
        """
        Initialize the bot core.

        Args:
            token: Telegram bot token
        """
        logger.info("Initializing bot core...")
        builder = Application.builder().token(token)
        builder.post_init(self._register_bot_commands)
        self.application = builder.build()
        logger.info("Bot core initialized")

    def run(self):
        """Run the bot"""
        logger.info("Starting bot...")
        self.application.run_polling()

    async def _register_bot_commands(self, application: Application):
        """Register bot commands once the application is ready."""

        bot_commands = [
            BotCommand("start", "Say hello to the concierge"),
            BotCommand("cancel", "Cancel whatever is in progress"),
            BotCommand("forget", "Delete what the bot remembers about you"),
        ]

        await application.bot.set_my_commands(commands=bot_commands)
