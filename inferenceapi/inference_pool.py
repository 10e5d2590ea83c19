"""The InferencePool resource: a group of model server pods behind an endpoint picker."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Iterator, Mapping

from inferenceapi.meta import (
    API_VERSION,
    Condition,
    ObjectMeta,
    ObjectReference,
    pending_condition,
)
from inferenceapi.shared_types import (
    ValidationError,
    validate_group,
    validate_kind,
    validate_label_key,
    validate_label_value,
    validate_object_name,
    validate_port_number,
)

__all__ = [
    "ExtensionFailureMode",
    "PoolConditionType",
    "PoolReason",
    "ExtensionReference",
    "Extension",
    "InferencePoolSpec",
    "PoolStatus",
    "InferencePoolStatus",
    "InferencePool",
    "InferencePoolList",
]

KIND = "InferencePool"
LIST_KIND = "InferencePoolList"
DEFAULT_EXTENSION_KIND = "Service"
DEFAULT_EXTENSION_GROUP = ""
DEFAULT_EXTENSION_PORT = 9002

_MAX_PARENTS = 32
_MAX_CONDITIONS = 8


class ExtensionFailureMode(str, Enum):
    """How the gateway handles an endpoint picker that does not respond."""

    FAIL_OPEN = "FailOpen"
    FAIL_CLOSE = "FailClose"


class PoolConditionType(str, Enum):
    """Condition types reported on an InferencePool."""

    ACCEPTED = "Accepted"
    RESOLVED_REFS = "ResolvedRefs"


class PoolReason(str, Enum):
    """Reasons for the condition types of an InferencePool."""

    ACCEPTED = "Accepted"
    NOT_SUPPORTED_BY_GATEWAY = "NotSupportedByGateway"
    PENDING = "Pending"
    RESOLVED_REFS = "ResolvedRefs"
    INVALID_EXTENSION_REF = "InvalidExtensionRef"


def _required(data: Mapping[str, Any], key: str, what: str) -> Any:
    try:
        return data[key]
    except KeyError:
        raise ValidationError(f"{what} is missing required field {key!r}") from None


def _check_conditions(conditions: list[Condition]) -> None:
    if len(conditions) > _MAX_CONDITIONS:
        raise ValidationError(
            f"at most {_MAX_CONDITIONS} conditions are allowed, got {len(conditions)}"
        )
    seen: set[str] = set()
    for condition in conditions:
        if condition.type in seen:
            raise ValidationError(f"duplicate condition type {condition.type!r}")
        seen.add(condition.type)


@dataclass
class ExtensionReference:
    """A reference to the service that runs the endpoint picker."""

    name: str
    group: str = DEFAULT_EXTENSION_GROUP
    kind: str = DEFAULT_EXTENSION_KIND
    port_number: int | None = None

    def validate(self) -> None:
        """Check the group, kind, name and port of the reference."""
        validate_group(self.group)
        validate_kind(self.kind)
        validate_object_name(self.name)
        if self.port_number is not None:
            validate_port_number(self.port_number)

    def effective_port(self) -> int | None:
        """The port to connect to: the given one, or 9002 for a Service."""
        if self.port_number is not None:
            return self.port_number
        if self.kind == DEFAULT_EXTENSION_KIND:
            return DEFAULT_EXTENSION_PORT
        return None

    def to_dict(self) -> dict[str, Any]:
        """Serialise to the wire form."""
        result: dict[str, Any] = {
            "group": self.group,
            "kind": self.kind,
            "name": self.name,
        }
        if self.port_number is not None:
            result["portNumber"] = self.port_number
        return result

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> ExtensionReference:
        """Build from the wire form; group and kind take their defaults when absent."""
        port = data.get("portNumber")
        group = data.get("group")
        kind = data.get("kind")
        return cls(
            name=_required(data, "name", "extension reference"),
            group=DEFAULT_EXTENSION_GROUP if group is None else group,
            kind=DEFAULT_EXTENSION_KIND if kind is None else kind,
            port_number=None if port is None else int(port),
        )


@dataclass
class Extension:
    """An endpoint picker run as an extension service, and how to connect to it."""

    reference: ExtensionReference
    failure_mode: ExtensionFailureMode | None = ExtensionFailureMode.FAIL_CLOSE

    def __post_init__(self) -> None:
        if self.failure_mode is not None:
            self.failure_mode = ExtensionFailureMode(self.failure_mode)

    def validate(self) -> None:
        """Check the reference."""
        self.reference.validate()

    def to_dict(self) -> dict[str, Any]:
        """Serialise to the wire form, with the reference fields inline."""
        result = self.reference.to_dict()
        result["failureMode"] = (
            None if self.failure_mode is None else self.failure_mode.value
        )
        return result

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Extension:
        """Build from the wire form; an absent failure mode means FailClose."""
        if "failureMode" in data:
            mode = data["failureMode"]
            failure_mode = None if mode is None else ExtensionFailureMode(mode)
        else:
            failure_mode = ExtensionFailureMode.FAIL_CLOSE
        return cls(
            reference=ExtensionReference.from_dict(data),
            failure_mode=failure_mode,
        )


@dataclass
class InferencePoolSpec:
    """The desired state of an InferencePool."""

    selector: dict[str, str]
    target_port_number: int
    extension_ref: Extension | None = None

    def validate(self) -> None:
        """Check the selector labels, the target port and the extension."""
        for key, value in self.selector.items():
            validate_label_key(key)
            validate_label_value(value)
        validate_port_number(self.target_port_number)
        if self.extension_ref is None:
            raise ValidationError("inference pool spec requires an extension reference")
        self.extension_ref.validate()

    def to_dict(self) -> dict[str, Any]:
        """Serialise to the wire form."""
        result: dict[str, Any] = {
            "selector": dict(self.selector),
            "targetPortNumber": self.target_port_number,
        }
        if self.extension_ref is not None:
            result["extensionRef"] = self.extension_ref.to_dict()
        return result

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> InferencePoolSpec:
        """Build from the wire form."""
        extension = data.get("extensionRef")
        return cls(
            selector=dict(_required(data, "selector", "inference pool spec") or {}),
            target_port_number=int(
                _required(data, "targetPortNumber", "inference pool spec")
            ),
            extension_ref=None if extension is None else Extension.from_dict(extension),
        )


def _default_pool_conditions() -> list[Condition]:
    return [pending_condition(PoolConditionType.ACCEPTED.value)]


@dataclass
class PoolStatus:
    """The state of an InferencePool as observed by one gateway."""

    gateway_ref: ObjectReference = field(default_factory=ObjectReference)
    conditions: list[Condition] = field(default_factory=_default_pool_conditions)

    def validate(self) -> None:
        """Check the number of conditions and that their types are unique."""
        _check_conditions(self.conditions)

    def to_dict(self) -> dict[str, Any]:
        """Serialise to the wire form, leaving out an empty condition list."""
        result: dict[str, Any] = {"parentRef": self.gateway_ref.to_dict()}
        if self.conditions:
            result["conditions"] = [condition.to_dict() for condition in self.conditions]
        return result

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> PoolStatus:
        """Build from the wire form; absent conditions take the pending default."""
        gateway_ref = ObjectReference.from_dict(data.get("parentRef"))
        if "conditions" not in data:
            return cls(gateway_ref=gateway_ref)
        return cls(
            gateway_ref=gateway_ref,
            conditions=[Condition.from_dict(item) for item in data["conditions"] or []],
        )


@dataclass
class InferencePoolStatus:
    """The observed state of an InferencePool across its parent gateways."""

    parents: list[PoolStatus] = field(default_factory=list)

    def validate(self) -> None:
        """Check the number of parents and each parent's status."""
        if len(self.parents) > _MAX_PARENTS:
            raise ValidationError(
                f"at most {_MAX_PARENTS} parents are allowed, got {len(self.parents)}"
            )
        for parent in self.parents:
            parent.validate()

    def to_dict(self) -> dict[str, Any]:
        """Serialise to the wire form, leaving out an empty parent list."""
        if not self.parents:
            return {}
        return {"parent": [parent.to_dict() for parent in self.parents]}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any] | None) -> InferencePoolStatus:
        """Build from the wire form."""
        data = data or {}
        return cls(parents=[PoolStatus.from_dict(item) for item in data.get("parent") or []])


@dataclass
class InferencePool:
    """A pool of model server pods and the endpoint picker that routes to them."""

    spec: InferencePoolSpec
    metadata: ObjectMeta = field(default_factory=ObjectMeta)
    status: InferencePoolStatus = field(default_factory=InferencePoolStatus)

    def validate(self) -> None:
        """Check the spec and the status."""
        self.spec.validate()
        self.status.validate()

    def to_dict(self) -> dict[str, Any]:
        """Serialise to the wire form, with API version and kind."""
        return {
            "apiVersion": API_VERSION,
            "kind": KIND,
            "metadata": self.metadata.to_dict(),
            "spec": self.spec.to_dict(),
            "status": self.status.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> InferencePool:
        """Build from the wire form, refusing documents of another kind."""
        kind = data.get("kind", KIND)
        if kind != KIND:
            raise ValidationError(f"expected kind {KIND!r}, got {kind!r}")
        return cls(
            spec=InferencePoolSpec.from_dict(_required(data, "spec", KIND)),
            metadata=ObjectMeta.from_dict(data.get("metadata")),
            status=InferencePoolStatus.from_dict(data.get("status")),
        )


@dataclass
class InferencePoolList:
    """A list of InferencePool resources."""

    items: list[InferencePool] = field(default_factory=list)
    resource_version: str = ""
    continue_token: str = ""

    def __iter__(self) -> Iterator[InferencePool]:
        return iter(self.items)

    def __len__(self) -> int:
        return len(self.items)

    def to_dict(self) -> dict[str, Any]:
        """Serialise to the wire form."""
        metadata: dict[str, Any] = {}
        if self.resource_version:
            metadata["resourceVersion"] = self.resource_version
        if self.continue_token:
            metadata["continue"] = self.continue_token
        return {
            "apiVersion": API_VERSION,
            "kind": LIST_KIND,
            "metadata": metadata,
            "items": [item.to_dict() for item in self.items],
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> InferencePoolList:
        """Build from the wire form."""
        kind = data.get("kind", LIST_KIND)
        if kind != LIST_KIND:
            raise ValidationError(f"expected kind {LIST_KIND!r}, got {kind!r}")
        metadata = data.get("metadata") or {}
        return cls(
            items=[InferencePool.from_dict(item) for item in data.get("items") or []],
            resource_version=metadata.get("resourceVersion", ""),
            continue_token=metadata.get("continue", ""),
        )