"""
Log filters: request correlation and static fields.
"""

import logging
import threading
from contextlib import contextmanager
from typing import Any, Dict, Iterator, Optional

# Worker threads execute one request at a time
_correlation = threading.local()


def set_correlation_id(correlation_id: str) -> None:
    _correlation.value = correlation_id


def get_correlation_id() -> Optional[str]:
    return getattr(_correlation, 'value', None)


def clear_correlation_id() -> None:
    _correlation.__dict__.pop('value', None)


@contextmanager
def correlation_scope(request_id: str) -> Iterator[str]:
    """
    Привязать request id к записям текущего потока на время блока.

    Предыдущее значение восстанавливается на выходе (вложенный post_sync
    внутри callback не теряет внешний id).
    """
    previous = get_correlation_id()
    set_correlation_id(request_id)
    try:
        yield request_id
    finally:
        if previous is None:
            clear_correlation_id()
        else:
            set_correlation_id(previous)


class CorrelationIdFilter(logging.Filter):
    """Stamps ``correlation_id`` of the request running on this thread."""

    def filter(self, record: logging.LogRecord) -> bool:
        correlation_id = get_correlation_id()
        if correlation_id and not hasattr(record, 'correlation_id'):
            record.correlation_id = correlation_id
        return True


class ExtraFieldsFilter(logging.Filter):
    """
    Static fields from ``LoggingConfig.extra_fields``.

    A field passed with the log call itself wins.
    """

    def __init__(self, extra_fields: Dict[str, Any]):
        super().__init__()
        self.extra_fields = dict(extra_fields)

    def filter(self, record: logging.LogRecord) -> bool:
        for key, value in self.extra_fields.items():
            record.__dict__.setdefault(key, value)
        return True
