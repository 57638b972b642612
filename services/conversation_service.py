"""
Service for persisting conversation state per chat session.
"""
import json
import logging
import time
from typing import Any, Dict, Optional

from pydantic import ValidationError

from models.state import ConversationState
from utils.errors import PersistenceError

logger = logging.getLogger(__name__)


class ConversationStateStore:
    """Keyed store of ConversationState blobs, in memory or in Redis."""

    def __init__(self,
                 redis_client=None,
                 ttl: int = 86400,
                 key_prefix: str = "conversation_state:"):
        """
        Initialize the store.

        Args:
            redis_client: redis.asyncio client; None keeps state in memory
            ttl: Time-to-live for stored state in seconds
            key_prefix: Prefix for Redis keys
        """
        self.redis = redis_client
        self.ttl = ttl
        self.key_prefix = key_prefix

        # In-memory session store used when no Redis client is given
        self._states: Dict[str, Dict[str, Any]] = {}
        self._timestamps: Dict[str, float] = {}

        backend = "Redis" if self.redis is not None else "in-memory storage"
        logger.info(f"Using {backend} for conversation state")

    @classmethod
    def from_config(cls, store_config: Dict[str, Any], redis_config: Dict[str, Any]) -> "ConversationStateStore":
        """Build a store from STATE_STORE_CONFIG / REDIS_CONFIG."""
        redis_client = None
        if store_config.get("backend") == "redis":
            import redis.asyncio as redis

            redis_client = redis.Redis(
                host=redis_config["host"],
                port=redis_config["port"],
                password=redis_config["password"] or None,
                db=redis_config["db"],
                decode_responses=True
            )
        return cls(redis_client, ttl=store_config.get("ttl", 86400),
                   key_prefix=store_config.get("key_prefix", "conversation_state:"))

    async def get(self, session_id: str) -> Optional[ConversationState]:
        """
        Load the state for a session.

        Args:
            session_id: The session identifier

        Returns:
            The stored state, or None when the session has none yet

        Raises:
            PersistenceError: if the backend cannot be read
        """
        if self.redis is not None:
            try:
                payload = await self.redis.get(self._key(session_id))
            except Exception as e:
                raise PersistenceError(f"Redis error reading state for {session_id}: {str(e)}") from e
            if not payload:
                logger.debug(f"No stored state for session: {session_id}")
                return None
            try:
                data = json.loads(payload)
            except json.JSONDecodeError as e:
                raise PersistenceError(f"Corrupt state stored for {session_id}") from e
        else:
            self._clean_expired_sessions()
            data = self._states.get(session_id)
            if data is None:
                logger.debug(f"No stored state for session: {session_id}")
                return None

        try:
            return ConversationState(**data)
        except (TypeError, ValidationError) as e:
            raise PersistenceError(f"Invalid state stored for {session_id}: {str(e)}") from e

    async def save(self, session_id: str, state: ConversationState):
        """
        Store the state for a session.

        Raises:
            PersistenceError: if the backend cannot be written
        """
        data = state.to_json_dict()
        if self.redis is not None:
            try:
                await self.redis.setex(self._key(session_id), self.ttl, json.dumps(data))
            except Exception as e:
                raise PersistenceError(f"Redis error saving state for {session_id}: {str(e)}") from e
        else:
            self._states[session_id] = data
            self._timestamps[session_id] = time.time()

        logger.debug(f"Saved state for session: {session_id}")

    async def clear(self, session_id: str) -> bool:
        """
        Delete the state for a session.

        Returns:
            True if state existed and was removed
        """
        if self.redis is not None:
            try:
                deleted = await self.redis.delete(self._key(session_id))
            except Exception as e:
                raise PersistenceError(f"Redis error deleting state for {session_id}: {str(e)}") from e
            logger.info(f"Cleared state for session: {session_id}")
            return deleted > 0

        existed = self._states.pop(session_id, None) is not None
        self._timestamps.pop(session_id, None)
        logger.info(f"Cleared state for session: {session_id}")
        return existed

    def _key(self, session_id: str) -> str:
        return f"{self.key_prefix}{session_id}"

    def _clean_expired_sessions(self):
        """Remove expired sessions from memory."""
        current_time = time.time()
        expired_sessions = [
            session_id for session_id, timestamp in self._timestamps.items()
            if current_time - timestamp > self.ttl
        ]

        for session_id in expired_sessions:
            self._states.pop(session_id, None)
            del self._timestamps[session_id]

        if expired_sessions:
            logger.info(f"Cleaned {len(expired_sessions)} expired sessions")
