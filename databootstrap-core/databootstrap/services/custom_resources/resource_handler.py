from __future__ import annotations

import logging
import math
from typing import Any, Optional

from databootstrap.services.custom_resources.exceptions import ValidationError
from databootstrap.services.custom_resources.models import (
    CreateRequest,
    DeleteRequest,
    HandlerResult,
    Properties,
    UpdateRequest,
)

LOG = logging.getLogger(__name__)


class ResourceHandler:
    """
    Base class of the handlers that bootstrap data into one external target.

    Subclasses implement Create/Update/Delete semantics and receive the adapters they need in their constructor.
    """

    # human-readable name of the target, used in log messages
    TARGET: str = "data"

    def on_create(self, request: CreateRequest) -> HandlerResult:
        raise NotImplementedError

    def on_update(self, request: UpdateRequest) -> HandlerResult:
        raise NotImplementedError

    def on_delete(self, request: DeleteRequest) -> HandlerResult:
        raise NotImplementedError

    def skip_update(self, request: UpdateRequest) -> HandlerResult:
        # TODO: re-bootstrapping on property changes needs a per-target cleanup procedure first
        LOG.warning("Updating this %s custom resource is a no-op!", self.TARGET)
        return HandlerResult(physical_resource_id=request.physical_resource_id, data={})

    def skip_delete(self, request: DeleteRequest) -> HandlerResult:
        LOG.warning("Deleting this %s custom resource is a no-op!", self.TARGET)
        return HandlerResult(physical_resource_id=request.physical_resource_id)


def require_property(properties: Properties, name: str) -> Any:
    """
    Return the value of a required resource property.

    :raises ValidationError: if the property is missing, None, or an empty string
    """
    value = properties.get(name)
    if value is None or value == "":
        raise ValidationError(f"Missing required resource property '{name}'")
    return value


def optional_number(properties: Properties, name: str, default: Optional[float] = None) -> Optional[float]:
    """
    Return a numeric resource property. CloudFormation passes all scalar property values as strings.

    :raises ValidationError: if the property is set but not a finite number
    """
    value = properties.get(name)
    if value is None or value == "":
        return default
    try:
        number = float(value)
    except (TypeError, ValueError) as e:
        raise ValidationError(f"Resource property '{name}' must be a number, got: {value!r}") from e
    if not math.isfinite(number):
        raise ValidationError(f"Resource property '{name}' must be a finite number, got: {value!r}")
    return number


def optional_integer(properties: Properties, name: str, default: Optional[int] = None) -> Optional[int]:
    """
    Return an integral resource property, e.g. a port. ``"5432"`` and ``"5432.0"`` are accepted, ``"5432.7"`` is not.

    :raises ValidationError: if the property is set but not an integer
    """
    number = optional_number(properties, name)
    if number is None:
        return default
    if not number.is_integer():
        raise ValidationError(f"Resource property '{name}' must be an integer, got: {properties.get(name)!r}")
    return int(number)
