"""
Log formatting of the bootstrap controller.

All records emitted while a lifecycle event is handled carry the ID of the CloudFormation request, so the log lines
of one stack operation can be found in a shared Lambda log stream.
"""

import logging
from contextlib import contextmanager
from contextvars import ContextVar
from typing import Optional

LOG_FORMAT = "%(asctime)s.%(msecs)03d %(levelname)-7s [%(request_id)s] %(name)s : %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%dT%H:%M:%S"

# placeholder for records emitted outside of a lifecycle request
NO_REQUEST_ID = "-"

_request_id: ContextVar[str] = ContextVar("bootstrap_request_id", default=NO_REQUEST_ID)


def get_request_id() -> str:
    return _request_id.get()


@contextmanager
def request_context(request_id: Optional[str]):
    """Attach ``request_id`` to all records logged within the context."""
    token = _request_id.set(request_id or NO_REQUEST_ID)
    try:
        yield
    finally:
        _request_id.reset(token)


class RequestIdFilter(logging.Filter):
    """Adds the ``request_id`` attribute to each record, unless it was passed explicitly via ``extra``."""

    def filter(self, record):
        if not getattr(record, "request_id", None):
            record.request_id = get_request_id()
        return True


class DefaultFormatter(logging.Formatter):
    def __init__(self, fmt=LOG_FORMAT, datefmt=LOG_DATE_FORMAT):
        super().__init__(fmt=fmt, datefmt=datefmt)
