"""Object metadata, status conditions and object references used by the API resources."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Mapping

__all__ = [
    "GROUP",
    "VERSION",
    "API_VERSION",
    "ConditionStatus",
    "ObjectMeta",
    "Condition",
    "ObjectReference",
    "pending_condition",
]

GROUP = "inference.networking.x-k8s.io"
VERSION = "v1alpha2"
API_VERSION = f"{GROUP}/{VERSION}"

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)
_PENDING_REASON = "Pending"
_PENDING_MESSAGE = "Waiting for controller"


def _format_time(moment: datetime) -> str:
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")


def _parse_time(text: str) -> datetime:
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    moment = datetime.fromisoformat(text)
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(timezone.utc)


def _enum_value(value: Any) -> Any:
    return value.value if isinstance(value, Enum) else value


class ConditionStatus(str, Enum):
    """The status of a condition."""

    TRUE = "True"
    FALSE = "False"
    UNKNOWN = "Unknown"


@dataclass
class ObjectMeta:
    """Identifying metadata of a stored object."""

    name: str = ""
    namespace: str = ""
    labels: dict[str, str] = field(default_factory=dict)
    annotations: dict[str, str] = field(default_factory=dict)
    uid: str = ""
    resource_version: str = ""
    generation: int = 0
    creation_timestamp: datetime | None = None

    def to_dict(self) -> dict[str, Any]:
        """Serialise to the wire form, leaving out empty fields."""
        entries: list[tuple[str, Any]] = [
            ("name", self.name),
            ("namespace", self.namespace),
            ("uid", self.uid),
            ("resourceVersion", self.resource_version),
            ("generation", self.generation),
            (
                "creationTimestamp",
                _format_time(self.creation_timestamp) if self.creation_timestamp else None,
            ),
            ("labels", dict(self.labels)),
            ("annotations", dict(self.annotations)),
        ]
        return {key: value for key, value in entries if value}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any] | None) -> ObjectMeta:
        """Build from the wire form; missing fields take their defaults."""
        data = data or {}
        created = data.get("creationTimestamp")
        return cls(
            name=data.get("name", ""),
            namespace=data.get("namespace", ""),
            labels=dict(data.get("labels") or {}),
            annotations=dict(data.get("annotations") or {}),
            uid=data.get("uid", ""),
            resource_version=data.get("resourceVersion", ""),
            generation=int(data.get("generation", 0)),
            creation_timestamp=_parse_time(created) if created else None,
        )


@dataclass
class Condition:
    """One aspect of the observed state of a resource."""

    type: str
    status: ConditionStatus
    reason: str
    message: str = ""
    last_transition_time: datetime = _EPOCH
    observed_generation: int = 0

    def __post_init__(self) -> None:
        self.type = _enum_value(self.type)
        self.reason = _enum_value(self.reason)
        self.status = ConditionStatus(self.status)

    def to_dict(self) -> dict[str, Any]:
        """Serialise to the wire form."""
        result: dict[str, Any] = {
            "type": self.type,
            "status": self.status.value,
        }
        if self.observed_generation:
            result["observedGeneration"] = self.observed_generation
        result["lastTransitionTime"] = _format_time(self.last_transition_time)
        result["reason"] = self.reason
        result["message"] = self.message
        return result

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Condition:
        """Build from the wire form."""
        try:
            condition_type = data["type"]
            status = data["status"]
        except KeyError as missing:
            raise ValueError(f"condition is missing field {missing.args[0]!r}") from None
        timestamp = data.get("lastTransitionTime")
        return cls(
            type=condition_type,
            status=ConditionStatus(status),
            reason=data.get("reason", ""),
            message=data.get("message", ""),
            last_transition_time=_parse_time(timestamp) if timestamp else _EPOCH,
            observed_generation=int(data.get("observedGeneration", 0)),
        )


@dataclass
class ObjectReference:
    """A reference to another object, such as the gateway that observed a pool."""

    kind: str = ""
    namespace: str = ""
    name: str = ""
    uid: str = ""
    api_version: str = ""
    resource_version: str = ""
    field_path: str = ""

    _WIRE_NAMES = (
        ("kind", "kind"),
        ("namespace", "namespace"),
        ("name", "name"),
        ("uid", "uid"),
        ("api_version", "apiVersion"),
        ("resource_version", "resourceVersion"),
        ("field_path", "fieldPath"),
    )

    def to_dict(self) -> dict[str, Any]:
        """Serialise to the wire form, leaving out empty fields."""
        return {
            wire: getattr(self, attr)
            for attr, wire in self._WIRE_NAMES
            if getattr(self, attr)
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any] | None) -> ObjectReference:
        """Build from the wire form; missing fields are empty."""
        data = data or {}
        return cls(**{attr: data.get(wire, "") for attr, wire in cls._WIRE_NAMES})


def pending_condition(condition_type: str) -> Condition:
    """The condition a resource carries before any controller has reconciled it."""
    return Condition(
        type=condition_type,
        status=ConditionStatus.UNKNOWN,
        reason=_PENDING_REASON,
        message=_PENDING_MESSAGE,
        last_transition_time=_EPOCH,
    )