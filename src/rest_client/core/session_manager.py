# src/rest_client/core/session_manager.py
"""
Thread-local requests.Session storage for RestClient.

requests.Session is not safe to share between threads, while ClientOptions
is. Each thread gets its own session built from the same options.
"""
import threading
import weakref
from typing import Callable, Set

import requests


class ThreadSafeSessionManager:
    """
    Lazily creates one session per thread and tracks them for cleanup.

    ``close_all()`` also acts as a reset: the next ``get_session()`` call in
    any thread builds a fresh session from the factory.

    Example:
        >>> manager = ThreadSafeSessionManager(client._create_session)
        >>> session = manager.get_session()
        >>> manager.close_all()
    """

    def __init__(self, session_factory: Callable[[], requests.Session]):
        self._session_factory = session_factory
        self._local = threading.local()
        self._generation = 0
        self._all_sessions: Set[weakref.ref] = set()
        self._sessions_lock = threading.RLock()

    def get_session(self) -> requests.Session:
        """Return the current thread's session, creating it if needed."""
        session = getattr(self._local, 'session', None)
        if session is not None and self._local.generation == self._generation:
            return session

        session = self._session_factory()
        with self._sessions_lock:
            self._local.session = session
            self._local.generation = self._generation
            self._all_sessions.add(weakref.ref(session, self._discard))
        return session

    def _discard(self, ref: weakref.ref) -> None:
        with self._sessions_lock:
            self._all_sessions.discard(ref)

    def close_all(self) -> None:
        """Close sessions of all threads; safe to call multiple times."""
        with self._sessions_lock:
            refs = list(self._all_sessions)
            self._all_sessions.clear()
            self._generation += 1

        for ref in refs:
            session = ref()
            if session is not None:
                session.close()
        self._local.session = None

    def get_active_sessions_count(self) -> int:
        """Number of live sessions across all threads."""
        with self._sessions_lock:
            return sum(1 for ref in self._all_sessions if ref() is not None)
