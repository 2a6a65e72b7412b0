# src/gateway_http/core/session_manager.py
"""
Thread-local ``requests.Session`` storage for HTTPClient workers.

Each pool thread gets its own Session. The HTTPS adapter of the session is
swapped only when the request's trust provider differs from the one already
mounted on that thread.
"""
import threading
import weakref
from typing import Callable, Optional, TYPE_CHECKING

import requests

if TYPE_CHECKING:
    from .tls import TLSTrustProvider


def create_session() -> requests.Session:
    """
    Session used by HTTPClient workers.

    Proxy and CA bundle environment variables are ignored so they cannot
    widen the trust store of a pinned client.
    """
    session = requests.Session()
    session.trust_env = False
    return session


class ThreadSafeSessionManager:
    """
    Сессии по одной на поток.

    Example:
        >>> manager = ThreadSafeSessionManager()
        >>> session = manager.get_session(provider)   # сессия текущего потока
        >>> manager.close_all()                       # все потоки
    """

    def __init__(self, session_factory: Callable[[], requests.Session] = create_session):
        self._session_factory = session_factory
        self._local = threading.local()
        # Session dies with its worker thread
        self._sessions: 'weakref.WeakSet[requests.Session]' = weakref.WeakSet()
        self._lock = threading.Lock()

    def get_session(self, trust_provider: Optional['TLSTrustProvider'] = None) -> requests.Session:
        """
        Session of the current thread, created on first access.

        Args:
            trust_provider: Provider whose adapter must serve ``https://``
        """
        session = getattr(self._local, 'session', None)
        if session is None:
            session = self._session_factory()
            self._local.session = session
            self._local.trust_provider = None
            with self._lock:
                self._sessions.add(session)

        if trust_provider is not None and self._local.trust_provider is not trust_provider:
            session.mount("https://", trust_provider.http_adapter())
            self._local.trust_provider = trust_provider

        return session

    def close_current_session(self) -> None:
        session = getattr(self._local, 'session', None)
        if session is None:
            return

        self._local.session = None
        self._local.trust_provider = None
        with self._lock:
            self._sessions.discard(session)
        session.close()

    def close_all(self) -> None:
        """Close the sessions of every thread. Idempotent."""
        self.close_current_session()

        with self._lock:
            sessions = list(self._sessions)
            self._sessions.clear()

        for session in sessions:
            session.close()

    @property
    def active_sessions(self) -> int:
        with self._lock:
            return len(self._sessions)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close_all()
        return False
