import logging
from typing import Mapping

from databootstrap.services.custom_resources.exceptions import UnknownResourceType
from databootstrap.services.custom_resources.models import (
    CreateRequest,
    DeleteRequest,
    HandlerResult,
    LifecycleEvent,
    UpdateRequest,
)
from databootstrap.services.custom_resources.resource_handler import ResourceHandler

LOG = logging.getLogger(__name__)


class EventDispatcher:
    """
    Routes a lifecycle event to the handler registered for its exact resource type.

    Delete requests for unknown resource types succeed without doing anything, so that a resource that was never
    (or is no longer) handled here can never block the deletion of its stack.
    """

    def __init__(self, handlers: Mapping[str, ResourceHandler]):
        self.handlers = dict(handlers)

    def dispatch(self, event: LifecycleEvent) -> HandlerResult:
        LOG.info(
            "%s request %s for %s (%s)",
            event.request_type.value,
            event.request_id,
            event.logical_resource_id,
            event.resource_type,
        )
        LOG.debug("Resource properties of %s: %s", event.logical_resource_id, event.resource_properties)

        handler = self.handlers.get(event.resource_type)
        if handler is None:
            return self._dispatch_unknown(event)

        match event:
            case CreateRequest():
                result = handler.on_create(event)
            case UpdateRequest():
                result = handler.on_update(event)
            case DeleteRequest():
                result = handler.on_delete(event)
            case _:
                raise TypeError(f"Invalid lifecycle event: {event!r}")

        LOG.info(
            "%s request %s completed with physical resource ID %s",
            event.request_type.value,
            event.request_id,
            result.physical_resource_id,
        )
        return result

    def _dispatch_unknown(self, event: LifecycleEvent) -> HandlerResult:
        if isinstance(event, DeleteRequest):
            LOG.warning("Ignoring Delete request for unknown ResourceType %s", event.resource_type)
            return HandlerResult(physical_resource_id=event.physical_resource_id)
        raise UnknownResourceType(event.resource_type, known_types=self.handlers.keys())
