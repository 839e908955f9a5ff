import logging
from pathlib import Path

from bots.bot_core import BotCore
from command_handlers.cancel_handler import CancelHandler
from command_handlers.forget_handler import ForgetHandler
from command_handlers.start_handler import StartHandler
from command_handlers.turn_handler import TurnHandler
from config.settings import Settings
from controllers.intent_classifier import IntentClassifier
from controllers.turn_dispatcher import TurnDispatcher
from conversations import INTENTS, build_registry
from models.enums import StorageBackend
from providers.file_state_store import FileStateStore
from providers.state_store import MemoryStateStore, StateStoring

logger = logging.getLogger(__name__)

class ConciergeBot:
    """
    Hotel concierge bot: greeting, dinner ordering and table reservations.

    This bot is responsible for:
    1. Building the flow registry, intent classifier and state store
    2. Wiring the /start, /cancel and /forget commands and plain text turns
       to the turn dispatcher
    3. Managing the bot lifecycle
    """

    def __init__(self, settings: Settings):
        logger.info("Initializing concierge bot...")
        self.core = BotCore(token=settings.bot_token)
        self.dispatcher = TurnDispatcher(
            registry=build_registry(),
            classifier=IntentClassifier(INTENTS),
            store=self._create_store(settings),
            max_steps_per_turn=settings.max_steps_per_turn,
        )
        self._setup_handlers()
        logger.info("Concierge bot initialized")

    @staticmethod
    def _create_store(settings: Settings) -> StateStoring:
        if settings.storage_backend == StorageBackend.FILE:
            logger.info(f"Persisting state to {settings.storage_directory}")
            return FileStateStore(Path(settings.storage_directory))
        logger.warning("Using volatile memory storage; state is lost on restart")
        return MemoryStateStore()

    def _setup_handlers(self):
        logger.info("Setting up handlers...")
        application = self.core.application
        application.add_handler(StartHandler(self.dispatcher).get_handler())
        application.add_handler(CancelHandler(self.dispatcher).get_handler())
        application.add_handler(ForgetHandler(self.dispatcher).get_handler())
        application.add_handler(TurnHandler(self.dispatcher).get_handler())
        logger.info("Handlers set up")

    def run(self):
        """Run the bot"""
        logger.info("Starting concierge bot...")
        self.core.run()
