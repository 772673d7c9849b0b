"""
Per-user conversation histories.

Every history starts with the fixed system prompt and only ever grows while
the session lives. Sessions are dropped when idle for longer than the TTL,
or least-recently-active first once more than ``max_sessions`` exist. A
session with a chat turn in flight is never dropped. A dropped user starts
over with a fresh history on their next message.
"""

from contextlib import contextmanager
import threading
import time
from typing import Callable, Dict, Iterator, List, Optional

from shop_assistant.config import CONVERSATION_MAX_SESSIONS, CONVERSATION_TTL_SECONDS
from shop_assistant.logger import get_logger
from shop_assistant.models import Turn
from shop_assistant.prompts import SYSTEM_PROMPT

logger = get_logger("conversation_store")


class _Session:
    __slots__ = ("turns", "lock", "last_active", "active")

    def __init__(self, system_prompt: str, now: float):
        self.turns: List[Turn] = [Turn(role="system", content=system_prompt)]
        self.lock = threading.Lock()
        self.last_active = now
        # Chat turns holding or waiting on self.lock
        self.active = 0


class ActiveConversation:
    """One user's history for the duration of a chat turn."""

    def __init__(self, store: "ConversationStore", user_id: str, session: _Session):
        self.store = store
        self.user_id = user_id
        self._session = session

    def history(self) -> List[Turn]:
        """Snapshot of the turns, system prompt first."""
        with self.store._lock:
            return list(self._session.turns)

    def append(self, turn: Turn) -> None:
        with self.store._lock:
            self._session.turns.append(turn)
            self._session.last_active = self.store._clock()


class ConversationStore:
    """
    Thread-safe mapping from user identifier to ordered dialogue history.

    The map itself is guarded by one lock. A whole chat turn runs inside
    ``turn(user_id)``, which holds that user's own lock; different users
    never contend on it.
    """

    def __init__(
        self,
        system_prompt: str = SYSTEM_PROMPT,
        max_sessions: Optional[int] = None,
        ttl_seconds: Optional[float] = None,
        clock: Callable[[], float] = time.monotonic
    ):
        """
        Args:
            system_prompt: First turn of every new history
            max_sessions: Cap on idle sessions kept (0 disables)
            ttl_seconds: Idle lifetime of a session (0 disables)
            clock: Monotonic time source, injectable for tests
        """
        self.system_prompt = system_prompt
        self.max_sessions = CONVERSATION_MAX_SESSIONS if max_sessions is None else max_sessions
        self.ttl_seconds = CONVERSATION_TTL_SECONDS if ttl_seconds is None else ttl_seconds
        self._clock = clock
        self._sessions: Dict[str, _Session] = {}
        self._lock = threading.Lock()

    def _session(self, user_id: str) -> _Session:
        # Caller holds self._lock
        now = self._clock()
        self._expire(now)
        session = self._sessions.get(user_id)
        if session is None:
            session = _Session(self.system_prompt, now)
            self._sessions[user_id] = session
        session.last_active = now
        self._prune(keep=user_id)
        return session

    def _expire(self, now: float) -> None:
        if not self.ttl_seconds or self.ttl_seconds <= 0:
            return
        stale = [
            user_id for user_id, session in self._sessions.items()
            if not session.active and now - session.last_active > self.ttl_seconds
        ]
        for user_id in stale:
            del self._sessions[user_id]
            logger.debug(f"Expired idle conversation for {user_id}")

    def _prune(self, keep: str) -> None:
        if not self.max_sessions or self.max_sessions <= 0:
            return
        overflow = len(self._sessions) - self.max_sessions
        if overflow <= 0:
            return
        # In-flight sessions may push the map over the cap until they finish
        idle = [
            item for item in self._sessions.items()
            if item[0] != keep and not item[1].active
        ]
        oldest = sorted(idle, key=lambda item: item[1].last_active)[:overflow]
        for user_id, _ in oldest:
            del self._sessions[user_id]
            logger.debug(f"Evicted conversation for {user_id} (max_sessions={self.max_sessions})")

    @contextmanager
    def turn(self, user_id: str) -> Iterator[ActiveConversation]:
        """
        Run one chat turn for a user with their history held.

        Blocks while another turn for the same user is in progress. The
        session is exempt from expiry and eviction until the block exits.
        """
        with self._lock:
            session = self._session(user_id)
            session.active += 1
        try:
            with session.lock:
                yield ActiveConversation(self, user_id, session)
        finally:
            with self._lock:
                session.active -= 1
                session.last_active = self._clock()

    def get_or_create(self, user_id: str) -> List[Turn]:
        """
        Return a snapshot of the user's history, seeding it if new.

        Args:
            user_id: Opaque user identifier

        Returns:
            Copy of the ordered turns, system prompt first
        """
        with self._lock:
            return list(self._session(user_id).turns)

    def append(self, user_id: str, turn: Turn) -> None:
        """Append a turn, creating the history first if needed."""
        with self._lock:
            self._session(user_id).turns.append(turn)

    def reset(self, user_id: str) -> None:
        """Drop a user's history; the next message starts a new one."""
        with self._lock:
            self._sessions.pop(user_id, None)

    def __contains__(self, user_id: str) -> bool:
        with self._lock:
            return user_id in self._sessions

    def __len__(self) -> int:
        with self._lock:
            return len(self._sessions)
