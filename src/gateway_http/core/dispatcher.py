# src/gateway_http/core/dispatcher.py
"""
Delivery of request results to the caller's execution context.

A worker thread produces exactly one ``Result`` per request and hands it to a
``CallbackDispatcher``. The dispatcher only *enqueues* the delivery onto its
designated context, so the worker never waits for the callback to finish.

Example:
    >>> dispatcher = QueueDispatcher()
    >>> client = HTTPClient(dispatcher=dispatcher)
    >>> client.get("https://api.example.com/ping", FunctionCallback(print, print))
    >>> dispatcher.run_once(timeout=5)   # callback runs on this thread
"""

import asyncio
import logging
import queue
import threading
from abc import ABC, abstractmethod
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass
from typing import Any, Callable, Optional

logger = logging.getLogger(__name__)

# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# RESULT ENVELOPE
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

@dataclass(frozen=True)
class Result:
    """
    Исход одного запроса: либо тело ответа, либо ошибка.

    Examples:
        >>> Result.success('{"ok": true}').unwrap()
        '{"ok": true}'
        >>> Result.failure(ValueError("boom")).is_success
        False
    """
    body: Optional[str] = None
    error: Optional[BaseException] = None
    is_success: bool = True

    def __post_init__(self):
        if self.is_success and self.error is not None:
            raise ValueError("A successful result cannot carry an error")
        if not self.is_success and self.error is None:
            raise ValueError("A failed result must carry an error")

    @classmethod
    def success(cls, body: Optional[str]) -> 'Result':
        return cls(body=body, is_success=True)

    @classmethod
    def failure(cls, error: BaseException) -> 'Result':
        return cls(error=error, is_success=False)

    def unwrap(self) -> Optional[str]:
        """Body on success, raises the error on failure."""
        if not self.is_success:
            raise self.error
        return self.body

# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# CALLBACKS
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

class HttpResponseCallback(ABC):
    """
    Получатель результата запроса.

    Ровно один из методов вызывается ровно один раз на запрос.
    """

    @abstractmethod
    def success(self, body: Optional[str]) -> None:
        """Ответ 200/201/202, тело как есть."""
        pass

    @abstractmethod
    def failure(self, exception: BaseException) -> None:
        """Любая ошибка: HTTP статус, TLS, сетевой сбой, парсинг."""
        pass


class FunctionCallback(HttpResponseCallback):
    """
    Adapts two plain functions to ``HttpResponseCallback``.

    Example:
        >>> callback = FunctionCallback(on_success=print, on_failure=log_error)
    """

    def __init__(
        self,
        on_success: Optional[Callable[[Optional[str]], Any]] = None,
        on_failure: Optional[Callable[[BaseException], Any]] = None
    ):
        self._on_success = on_success
        self._on_failure = on_failure

    def success(self, body: Optional[str]) -> None:
        if self._on_success is not None:
            self._on_success(body)

    def failure(self, exception: BaseException) -> None:
        if self._on_failure is not None:
            self._on_failure(exception)

# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# DISPATCHERS
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

class CallbackDispatcher(ABC):
    """
    Base dispatcher: subclasses decide *where* a delivery runs.

    ``deliver()`` invokes the callback, then resolves the future with the same
    result. Exceptions raised by the callback are logged and do not reach the
    dispatcher context.
    """

    def deliver(
        self,
        callback: Optional[HttpResponseCallback],
        result: Result,
        future: Optional[Future] = None
    ) -> None:
        """Enqueue one delivery onto the designated context."""
        self._schedule(lambda: self._run(callback, result, future))

    @abstractmethod
    def _schedule(self, task: Callable[[], None]) -> None:
        pass

    @staticmethod
    def _run(
        callback: Optional[HttpResponseCallback],
        result: Result,
        future: Optional[Future]
    ) -> None:
        if callback is not None:
            try:
                if result.is_success:
                    callback.success(result.body)
                else:
                    callback.failure(result.error)
            except Exception:
                logger.exception("Response callback %r raised", callback)

        if future is not None:
            if result.is_success:
                future.set_result(result.body)
            else:
                future.set_exception(result.error)

    def close(self) -> None:
        """Release the context's resources. Idempotent."""
        pass


class InlineDispatcher(CallbackDispatcher):
    """Delivers on the producing thread. For callers managing their own threading."""

    def _schedule(self, task: Callable[[], None]) -> None:
        task()


class SerialDispatcher(CallbackDispatcher):
    """
    Delivers every result on one dedicated thread, in FIFO order.

    Default dispatcher of ``HTTPClient``.
    """

    def __init__(self, thread_name: str = "gateway-callbacks"):
        self._executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix=thread_name)
        self._lock = threading.Lock()
        self._closed = False

    def _schedule(self, task: Callable[[], None]) -> None:
        with self._lock:
            if self._closed:
                raise RuntimeError("Dispatcher is closed")
            self._executor.submit(task)

    def close(self) -> None:
        with self._lock:
            if self._closed:
                return
            self._closed = True
        # Pending deliveries still run
        self._executor.shutdown(wait=True)


class QueueDispatcher(CallbackDispatcher):
    """
    Holds deliveries until the owning thread drains them.

    Models a UI/main loop: the thread that calls ``run_pending()`` or
    ``run_once()`` is the callback context.

    Example:
        >>> dispatcher = QueueDispatcher()
        >>> client.get("/ping", callback)
        >>> while not done:
        ...     dispatcher.run_once(timeout=0.1)
    """

    def __init__(self):
        self._queue: "queue.Queue[Callable[[], None]]" = queue.Queue()

    def _schedule(self, task: Callable[[], None]) -> None:
        self._queue.put(task)

    def run_once(self, timeout: Optional[float] = None) -> bool:
        """
        Run one delivery, waiting up to ``timeout`` seconds for it.

        Returns:
            True если доставка выполнена, False если очередь пуста
        """
        try:
            task = self._queue.get(timeout=timeout)
        except queue.Empty:
            return False
        task()
        return True

    def run_pending(self) -> int:
        """Run every queued delivery without waiting. Returns the count."""
        count = 0
        while True:
            try:
                task = self._queue.get_nowait()
            except queue.Empty:
                return count
            task()
            count += 1

    @property
    def pending(self) -> int:
        return self._queue.qsize()


class AsyncioDispatcher(CallbackDispatcher):
    """Delivers on an asyncio event loop via ``call_soon_threadsafe``."""

    def __init__(self, loop: Optional[asyncio.AbstractEventLoop] = None):
        self._loop = loop or asyncio.get_running_loop()

    @property
    def loop(self) -> asyncio.AbstractEventLoop:
        return self._loop

    def _schedule(self, task: Callable[[], None]) -> None:
        self._loop.call_soon_threadsafe(task)
