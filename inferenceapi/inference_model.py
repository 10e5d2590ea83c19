"""The InferenceModel resource: a model use case served from an inference pool."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Mapping

from inferenceapi.meta import (
    API_VERSION,
    GROUP,
    Condition,
    ObjectMeta,
    pending_condition,
)
from inferenceapi.shared_types import (
    ValidationError,
    validate_group,
    validate_kind,
    validate_object_name,
)

__all__ = [
    "Criticality",
    "ModelConditionType",
    "ModelConditionReason",
    "TargetModel",
    "PoolObjectReference",
    "InferenceModelSpec",
    "InferenceModelStatus",
    "InferenceModel",
    "InferenceModelList",
]

KIND = "InferenceModel"
LIST_KIND = "InferenceModelList"
DEFAULT_POOL_KIND = "InferencePool"

_MODEL_NAME_MAX_LENGTH = 256
_TARGET_NAME_MAX_LENGTH = 253
_MAX_TARGET_MODELS = 10
_WEIGHT_MIN = 1
_WEIGHT_MAX = 1_000_000
_MAX_CONDITIONS = 8
_DEFAULT_CONDITION_TYPE = "Ready"


class Criticality(str, Enum):
    """How important it is to serve a model compared to others in the same pool."""

    CRITICAL = "Critical"
    STANDARD = "Standard"
    SHEDDABLE = "Sheddable"


class ModelConditionType(str, Enum):
    """Condition types reported on an InferenceModel."""

    ACCEPTED = "Accepted"


class ModelConditionReason(str, Enum):
    """Reasons for the condition types of an InferenceModel."""

    ACCEPTED = "Accepted"
    NAME_IN_USE = "ModelNameInUse"
    PENDING = "Pending"


def _required(data: Mapping[str, Any], key: str, what: str) -> Any:
    try:
        return data[key]
    except KeyError:
        raise ValidationError(f"{what} is missing required field {key!r}") from None


def _check_str(value: Any, what: str) -> str:
    if not isinstance(value, str):
        raise TypeError(f"{what} must be a string, not {type(value).__name__}")
    return value


@dataclass
class TargetModel:
    """A deployed model or LoRA adapter that receives a share of the traffic."""

    name: str
    weight: int | None = None

    def validate(self) -> None:
        """Check the name length and the weight range."""
        _check_str(self.name, "target model name")
        if len(self.name) > _TARGET_NAME_MAX_LENGTH:
            raise ValidationError(
                f"target model name is longer than {_TARGET_NAME_MAX_LENGTH} characters"
            )
        if self.weight is None:
            return
        if isinstance(self.weight, bool) or not isinstance(self.weight, int):
            raise TypeError(
                f"weight must be an integer, not {type(self.weight).__name__}"
            )
        if not _WEIGHT_MIN <= self.weight <= _WEIGHT_MAX:
            raise ValidationError(
                f"weight {self.weight} of {self.name!r} is outside "
                f"the range {_WEIGHT_MIN}-{_WEIGHT_MAX}"
            )

    def to_dict(self) -> dict[str, Any]:
        """Serialise to the wire form."""
        result: dict[str, Any] = {"name": self.name}
        if self.weight is not None:
            result["weight"] = self.weight
        return result

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> TargetModel:
        """Build from the wire form."""
        weight = data.get("weight")
        return cls(
            name=_required(data, "name", "target model"),
            weight=None if weight is None else int(weight),
        )


@dataclass
class PoolObjectReference:
    """A reference to an inference pool in the same namespace."""

    name: str
    group: str = GROUP
    kind: str = DEFAULT_POOL_KIND

    def validate(self) -> None:
        """Check the group, kind and name of the reference."""
        validate_group(self.group)
        validate_kind(self.kind)
        validate_object_name(self.name)

    def to_dict(self) -> dict[str, Any]:
        """Serialise to the wire form, leaving out an empty group or kind."""
        result: dict[str, Any] = {}
        if self.group:
            result["group"] = self.group
        if self.kind:
            result["kind"] = self.kind
        result["name"] = self.name
        return result

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> PoolObjectReference:
        """Build from the wire form; group and kind take their defaults when absent."""
        return cls(
            name=_required(data, "name", "pool reference"),
            group=data.get("group", GROUP),
            kind=data.get("kind", DEFAULT_POOL_KIND),
        )


@dataclass
class InferenceModelSpec:
    """The desired state of a model use case."""

    model_name: str
    pool_ref: PoolObjectReference
    criticality: Criticality | None = None
    target_models: list[TargetModel] = field(default_factory=list)

    def __post_init__(self) -> None:
        if self.criticality is not None:
            self.criticality = Criticality(self.criticality)

    def validate(self) -> None:
        """Check the model name, the target models and the pool reference."""
        _check_str(self.model_name, "model name")
        if len(self.model_name) > _MODEL_NAME_MAX_LENGTH:
            raise ValidationError(
                f"model name is longer than {_MODEL_NAME_MAX_LENGTH} characters"
            )
        if len(self.target_models) > _MAX_TARGET_MODELS:
            raise ValidationError(
                f"at most {_MAX_TARGET_MODELS} target models are allowed, "
                f"got {len(self.target_models)}"
            )
        for target in self.target_models:
            target.validate()
        weighted = [target.weight is not None for target in self.target_models]
        if any(weighted) and not all(weighted):
            raise ValidationError(
                "Weights should be set for all models, or none of the models."
            )
        self.pool_ref.validate()

    def to_dict(self) -> dict[str, Any]:
        """Serialise to the wire form."""
        result: dict[str, Any] = {"modelName": self.model_name}
        if self.criticality is not None:
            result["criticality"] = self.criticality.value
        if self.target_models:
            result["targetModels"] = [target.to_dict() for target in self.target_models]
        result["poolRef"] = self.pool_ref.to_dict()
        return result

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> InferenceModelSpec:
        """Build from the wire form."""
        criticality = data.get("criticality")
        return cls(
            model_name=_required(data, "modelName", "inference model spec"),
            pool_ref=PoolObjectReference.from_dict(
                _required(data, "poolRef", "inference model spec")
            ),
            criticality=None if criticality is None else Criticality(criticality),
            target_models=[
                TargetModel.from_dict(item) for item in data.get("targetModels") or []
            ],
        )


def _default_conditions() -> list[Condition]:
    return [pending_condition(_DEFAULT_CONDITION_TYPE)]


@dataclass
class InferenceModelStatus:
    """The observed state of an InferenceModel."""

    conditions: list[Condition] = field(default_factory=_default_conditions)

    def validate(self) -> None:
        """Check the number of conditions and that their types are unique."""
        if len(self.conditions) > _MAX_CONDITIONS:
            raise ValidationError(
                f"at most {_MAX_CONDITIONS} conditions are allowed, "
                f"got {len(self.conditions)}"
            )
        seen: set[str] = set()
        for condition in self.conditions:
            if condition.type in seen:
                raise ValidationError(f"duplicate condition type {condition.type!r}")
            seen.add(condition.type)

    def to_dict(self) -> dict[str, Any]:
        """Serialise to the wire form, leaving out an empty condition list."""
        if not self.conditions:
            return {}
        return {"conditions": [condition.to_dict() for condition in self.conditions]}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any] | None) -> InferenceModelStatus:
        """Build from the wire form; absent conditions take the pending default."""
        data = data or {}
        if "conditions" not in data:
            return cls()
        return cls(
            conditions=[Condition.from_dict(item) for item in data["conditions"] or []]
        )


@dataclass
class InferenceModel:
    """A model use case and the pool that serves it."""

    spec: InferenceModelSpec
    metadata: ObjectMeta = field(default_factory=ObjectMeta)
    status: InferenceModelStatus = field(default_factory=InferenceModelStatus)

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
    def from_dict(cls, data: Mapping[str, Any]) -> InferenceModel:
        """Build from the wire form, refusing documents of another kind."""
        kind = data.get("kind", KIND)
        if kind != KIND:
            raise ValidationError(f"expected kind {KIND!r}, got {kind!r}")
        return cls(
            spec=InferenceModelSpec.from_dict(_required(data, "spec", KIND)),
            metadata=ObjectMeta.from_dict(data.get("metadata")),
            status=InferenceModelStatus.from_dict(data.get("status")),
        )


@dataclass
class InferenceModelList:
    """A list of InferenceModel resources."""

    items: list[InferenceModel] = field(default_factory=list)
    resource_version: str = ""
    continue_token: str = ""

    def __iter__(self):
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
    def from_dict(cls, data: Mapping[str, Any]) -> InferenceModelList:
        """Build from the wire form."""
        kind = data.get("kind", LIST_KIND)
        if kind != LIST_KIND:
            raise ValidationError(f"expected kind {LIST_KIND!r}, got {kind!r}")
        metadata = data.get("metadata") or {}
        return cls(
            items=[InferenceModel.from_dict(item) for item in data.get("items") or []],
            resource_version=metadata.get("resourceVersion", ""),
            continue_token=metadata.get("continue", ""),
        )