"""
Lifecycle events sent by the CloudFormation custom resource provider framework, and the results returned to it.

An event is one of three request variants (``CreateRequest``, ``UpdateRequest``, ``DeleteRequest``). Only Update
and Delete requests carry the physical resource ID of an existing resource, and only Update requests carry the
previous resource properties.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, ClassVar, Optional, TypedDict, Union

from databootstrap.services.custom_resources.exceptions import ValidationError

Properties = dict[str, Any]


class RequestType(str, Enum):
    CREATE = "Create"
    UPDATE = "Update"
    DELETE = "Delete"


class CustomResourceRequestPayload(TypedDict, total=False):
    RequestType: str
    ResourceType: str
    ResourceProperties: Properties
    OldResourceProperties: Properties
    PhysicalResourceId: str
    RequestId: str
    StackId: str
    LogicalResourceId: str
    ServiceToken: str
    ResponseURL: str


class CustomResourceResultPayload(TypedDict, total=False):
    PhysicalResourceId: str
    Data: dict[str, Any]
    NoEcho: bool


@dataclass(frozen=True, kw_only=True)
class LifecycleRequest:
    request_type: ClassVar[RequestType]

    resource_type: str
    resource_properties: Properties = field(default_factory=dict)
    request_id: str = ""
    stack_id: str = ""
    logical_resource_id: str = ""


@dataclass(frozen=True, kw_only=True)
class CreateRequest(LifecycleRequest):
    request_type: ClassVar[RequestType] = RequestType.CREATE


@dataclass(frozen=True, kw_only=True)
class UpdateRequest(LifecycleRequest):
    request_type: ClassVar[RequestType] = RequestType.UPDATE

    physical_resource_id: str
    old_resource_properties: Properties = field(default_factory=dict)


@dataclass(frozen=True, kw_only=True)
class DeleteRequest(LifecycleRequest):
    request_type: ClassVar[RequestType] = RequestType.DELETE

    physical_resource_id: str


LifecycleEvent = Union[CreateRequest, UpdateRequest, DeleteRequest]


@dataclass(frozen=True)
class HandlerResult:
    physical_resource_id: str
    data: Optional[dict[str, Any]] = None
    no_echo: Optional[bool] = None

    def to_dict(self) -> CustomResourceResultPayload:
        result: CustomResourceResultPayload = {"PhysicalResourceId": self.physical_resource_id}
        if self.data is not None:
            result["Data"] = self.data
        if self.no_echo is not None:
            result["NoEcho"] = self.no_echo
        return result


def parse_event(payload: CustomResourceRequestPayload) -> LifecycleEvent:
    """
    Convert a raw CloudFormation custom resource request into the matching request variant.

    :raises ValidationError: if the request type is missing or unknown, or an Update/Delete request has no
        physical resource ID
    """
    if not isinstance(payload, dict):
        raise ValidationError(f"Lifecycle event must be a JSON object, got {type(payload).__name__}")

    common = {
        "resource_type": payload.get("ResourceType") or "",
        "resource_properties": dict(payload.get("ResourceProperties") or {}),
        "request_id": payload.get("RequestId") or "",
        "stack_id": payload.get("StackId") or "",
        "logical_resource_id": payload.get("LogicalResourceId") or "",
    }

    request_type = payload.get("RequestType")
    match request_type:
        case RequestType.CREATE.value:
            return CreateRequest(**common)
        case RequestType.UPDATE.value:
            return UpdateRequest(
                **common,
                physical_resource_id=_require_physical_id(payload),
                old_resource_properties=dict(payload.get("OldResourceProperties") or {}),
            )
        case RequestType.DELETE.value:
            return DeleteRequest(**common, physical_resource_id=_require_physical_id(payload))
        case _:
            raise ValidationError(
                f"Unexpected RequestType '{request_type}' not in {[t.value for t in RequestType]}"
            )


def _require_physical_id(payload: CustomResourceRequestPayload) -> str:
    physical_resource_id = payload.get("PhysicalResourceId")
    if not physical_resource_id:
        raise ValidationError(
            f"{payload.get('RequestType')} request for {payload.get('LogicalResourceId')} "
            "is missing the PhysicalResourceId"
        )
    return physical_resource_id
