"""
AWS Lambda entry point of the CloudFormation custom resource provider.

The dispatcher and its clients are created on the first invocation and reused by all later invocations of the same
execution environment.
"""

import json
import logging
from typing import Any, Optional

from databootstrap import config
from databootstrap.logging.format import request_context
from databootstrap.logging.setup import setup_logging_from_config
from databootstrap.services.custom_resources.dispatcher import EventDispatcher
from databootstrap.services.custom_resources.exceptions import BootstrapError
from databootstrap.services.custom_resources.models import (
    CustomResourceRequestPayload,
    CustomResourceResultPayload,
    parse_event,
)
from databootstrap.services.providers import create_dispatcher

LOG = logging.getLogger(__name__)

_dispatcher: Optional[EventDispatcher] = None


def get_dispatcher() -> EventDispatcher:
    global _dispatcher
    if _dispatcher is None:
        setup_logging_from_config()
        _dispatcher = create_dispatcher()
    return _dispatcher


def handle_event(
    payload: CustomResourceRequestPayload, dispatcher: EventDispatcher
) -> CustomResourceResultPayload:
    """Parse, dispatch and serialize a single lifecycle event. Any error fails the event."""
    details = payload if isinstance(payload, dict) else {}
    with request_context(details.get("RequestId")):
        try:
            event = parse_event(payload)
            return dispatcher.dispatch(event).to_dict()
        except BootstrapError as e:
            LOG.error(
                "%s request for %s (%s) failed: %s",
                details.get("RequestType"),
                details.get("LogicalResourceId"),
                details.get("ResourceType"),
                e,
                exc_info=config.DEBUG,
            )
            raise
        except Exception:
            LOG.exception(
                "Unexpected error handling %s request for %s",
                details.get("RequestType"),
                details.get("LogicalResourceId"),
            )
            raise


def handler(event: CustomResourceRequestPayload, context: Any) -> CustomResourceResultPayload:
    dispatcher = get_dispatcher()
    LOG.debug("Event: %s", json.dumps(event, indent=2, default=str))
    return handle_event(event, dispatcher)
