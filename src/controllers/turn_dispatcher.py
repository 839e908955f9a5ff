import logging
from abc import ABC, abstractmethod
from typing import List, Optional

from pydantic import ValidationError

from controllers.intent_classifier import IntentClassifier
from engine.errors import FlowNotFoundError
from engine.flow_definition import FlowRegistry
from engine.flow_engine import DEFAULT_MAX_STEPS, FlowEngine
from localization import Key
from models.models import ConversationRecord, IntentMatch, OutgoingMessage, UserRecord
from providers.state_store import (
    KeyLocks,
    StateLoadError,
    StateStoreError,
    StateStoring,
    conversation_key,
    user_key,
)

logger = logging.getLogger(__name__)


class TurnFailedError(Exception):
    """Raised when a turn cannot be completed; none of its effects were kept."""

    def __init__(self, conversation_id: str, reason: str):
        super().__init__(f"Turn failed for conversation {conversation_id}: {reason}")
        self.conversation_id = conversation_id


class TurnDispatching(ABC):

    @abstractmethod
    async def handle_turn(
        self, text: str, conversation_id: str, user_id: Optional[str] = None
    ) -> List[OutgoingMessage]:
        """
        Process one inbound message and return the messages to send back, in order.

        Starts the flow of a matching keyword when the conversation is idle,
        resumes the active flow otherwise, and falls back to a hint message when
        neither applies. State is loaded once and saved once per turn.

        Raises:
            TurnFailedError: when state cannot be loaded or saved
        """
        pass

    @abstractmethod
    async def cancel(self, conversation_id: str) -> List[OutgoingMessage]:
        """Clear every active flow of the conversation."""
        pass

    @abstractmethod
    async def welcome(self, conversation_id: str, user_id: Optional[str] = None) -> List[OutgoingMessage]:
        """Greet the user, by name when their profile is known."""
        pass

    @abstractmethod
    async def forget_user(self, user_id: str) -> List[OutgoingMessage]:
        """Delete everything stored about the user."""
        pass


class TurnDispatcher(TurnDispatching):

    def __init__(
        self,
        registry: FlowRegistry,
        classifier: IntentClassifier,
        store: StateStoring,
        *,
        max_steps_per_turn: int = DEFAULT_MAX_STEPS,
    ):
        for flow in classifier.flows:
            if flow not in registry:
                raise FlowNotFoundError(flow)

        self.registry = registry
        self.classifier = classifier
        self.store = store
        self.max_steps_per_turn = max_steps_per_turn
        self._conversation_locks = KeyLocks()

    async def handle_turn(
        self, text: str, conversation_id: str, user_id: Optional[str] = None
    ) -> List[OutgoingMessage]:
        user_id = user_id or conversation_id

        async with self._conversation_locks(conversation_id):
            conversation = await self._load_conversation(conversation_id)
            user = await self._load_user(conversation_id, user_id)
            conversation_before = conversation.model_dump(mode="json")
            user_before = user.model_dump(mode="json")

            engine = FlowEngine(self.registry, conversation, max_steps=self.max_steps_per_turn)
            intent = self.classifier.classify(text)

            if not engine.is_active and isinstance(intent, IntentMatch):
                logger.info(f"Conversation {conversation_id}: starting {intent.flow} for keyword '{intent.keyword}'")
                engine.push(intent.flow)
            elif engine.is_active:
                logger.debug(f"Conversation {conversation_id}: resuming {engine.active_frame.flow}")
                engine.resume(text)
            else:
                engine.say(self._fallback_text(user))

            if engine.profile_updates:
                user.profile = user.profile.model_copy(update=engine.profile_updates)

            conversation_after = conversation.model_dump(mode="json")
            conversation_saved = False
            if conversation_after != conversation_before:
                await self._save(conversation_id, conversation_key(conversation_id), conversation_after)
                conversation_saved = True

            if user.model_dump(mode="json") != user_before:
                try:
                    await self._save(conversation_id, user_key(user_id), user.model_dump(mode="json"))
                except TurnFailedError:
                    if conversation_saved:
                        await self._restore(conversation_id, conversation_before)
                    raise

            return engine.outbox

    async def cancel(self, conversation_id: str) -> List[OutgoingMessage]:
        async with self._conversation_locks(conversation_id):
            conversation = await self._load_conversation(conversation_id)
            engine = FlowEngine(self.registry, conversation, max_steps=self.max_steps_per_turn)

            if not engine.is_active:
                return [OutgoingMessage(text=Key.cancel.nothing_active)]

            engine.cancel_all()
            await self._save(conversation_id, conversation_key(conversation_id), conversation.model_dump(mode="json"))
            return [OutgoingMessage(text=Key.cancel.done)]

    async def welcome(self, conversation_id: str, user_id: Optional[str] = None) -> List[OutgoingMessage]:
        user = await self._load_user(conversation_id, user_id or conversation_id)
        if user.profile.name:
            return [OutgoingMessage(text=Key.start.welcome_back.format(name=user.profile.name))]
        return [OutgoingMessage(text=Key.start.welcome.format(keywords=self._keyword_hint()))]

    async def forget_user(self, user_id: str) -> List[OutgoingMessage]:
        try:
            removed = await self.store.delete(user_key(user_id))
        except (OSError, StateStoreError) as e:
            raise TurnFailedError(user_id, str(e)) from e
        logger.info(f"User {user_id} data deleted: {removed}")
        return [OutgoingMessage(text=Key.forget.done)]

    async def _load_conversation(self, conversation_id: str) -> ConversationRecord:
        key = conversation_key(conversation_id)
        try:
            return ConversationRecord.model_validate(await self.store.load(key))
        except (StateLoadError, ValidationError) as e:
            logger.error(f"Could not load {key}: {e}", exc_info=True)
            raise TurnFailedError(conversation_id, str(e)) from e

    async def _load_user(self, conversation_id: str, user_id: str) -> UserRecord:
        key = user_key(user_id)
        try:
            return UserRecord.model_validate(await self.store.load(key))
        except (StateLoadError, ValidationError) as e:
            logger.error(f"Could not load {key}: {e}", exc_info=True)
            raise TurnFailedError(conversation_id, str(e)) from e

    async def _save(self, conversation_id: str, key: str, values: dict) -> None:
        try:
            await self.store.save(key, values)
        except StateStoreError as e:
            logger.error(f"Could not save {key}: {e}", exc_info=True)
            raise TurnFailedError(conversation_id, str(e)) from e

    async def _restore(self, conversation_id: str, values: dict) -> None:
        key = conversation_key(conversation_id)
        try:
            await self.store.save(key, values)
        except StateStoreError as e:
            logger.error(f"Could not roll back {key}: {e}", exc_info=True)
        else:
            logger.info(f"Rolled back {key} after a failed turn")

    def _keyword_hint(self) -> str:
        return " or ".join(f"'{keyword}'" for keyword in self.classifier.keywords)

    def _fallback_text(self, user: UserRecord) -> str:
        if user.profile.name:
            return Key.fallback.named.format(name=user.profile.name, keywords=self._keyword_hint())
        return Key.fallback.anonymous.format(keywords=self._keyword_hint())
