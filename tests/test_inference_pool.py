import pytest

from inferenceapi.inference_pool import (
    Extension,
    ExtensionFailureMode,
    ExtensionReference,
    InferencePool,
    InferencePoolList,
    InferencePoolSpec,
    InferencePoolStatus,
    PoolConditionType,
    PoolReason,
    PoolStatus,
)
from inferenceapi.meta import Condition, ConditionStatus, ObjectMeta, ObjectReference
from inferenceapi.shared_types import ValidationError


def make_pool(name="vllm-llama3-8b-instruct", ns="default"):
    spec = InferencePoolSpec(
        selector={"app": "vllm-llama3-8b-instruct"},
        target_port_number=8000,
        extension_ref=Extension(ExtensionReference(name="vllm-llama3-8b-instruct-epp")),
    )
    return InferencePool(spec=spec, metadata=ObjectMeta(name=name, namespace=ns))


def test_extension_reference_defaults():
    ref = ExtensionReference(name="epp")
    assert ref.kind == "Service"
    assert ref.group == ""
    assert ref.port_number is None


def test_effective_port_defaults_for_service():
    assert ExtensionReference(name="epp").effective_port() == 9002


def test_effective_port_explicit():
    assert ExtensionReference(name="epp", port_number=9003).effective_port() == 9003


def test_effective_port_none_for_other_kind():
    assert ExtensionReference(name="epp", kind="Deployment").effective_port() is None


def test_extension_reference_from_dict_defaults():
    ref = ExtensionReference.from_dict({"name": "epp"})
    assert ref == ExtensionReference(name="epp", group="", kind="Service")


def test_extension_reference_requires_name():
    with pytest.raises(ValidationError):
        ExtensionReference.from_dict({"kind": "Service"})


@pytest.mark.parametrize("port", [0, 65536])
def test_extension_reference_bad_port(port):
    with pytest.raises(ValidationError):
        ExtensionReference(name="epp", port_number=port).validate()


def test_extension_reference_bad_kind():
    with pytest.raises(ValidationError):
        ExtensionReference(name="epp", kind="invalid/kind").validate()


def test_extension_reference_bad_group():
    with pytest.raises(ValidationError):
        ExtensionReference(name="epp", group="example.com/bar").validate()


def test_extension_default_failure_mode():
    ext = Extension(ExtensionReference(name="epp"))
    assert ext.failure_mode is ExtensionFailureMode.FAIL_CLOSE
    assert ext.to_dict()["failureMode"] == "FailClose"


def test_extension_inline_wire_form():
    ext = Extension(
        ExtensionReference(name="epp", port_number=9002),
        failure_mode=ExtensionFailureMode.FAIL_OPEN,
    )
    assert ext.to_dict() == {
        "group": "",
        "kind": "Service",
        "name": "epp",
        "portNumber": 9002,
        "failureMode": "FailOpen",
    }


def test_extension_round_trip():
    ext = Extension(ExtensionReference(name="epp", port_number=9003), "FailOpen")
    assert Extension.from_dict(ext.to_dict()) == ext


def test_extension_absent_failure_mode_defaults():
    ext = Extension.from_dict({"name": "epp"})
    assert ext.failure_mode is ExtensionFailureMode.FAIL_CLOSE


def test_extension_rejects_unknown_failure_mode():
    with pytest.raises(ValueError):
        Extension.from_dict({"name": "epp", "failureMode": "Sometimes"})


def test_pool_spec_valid():
    spec = make_pool().spec
    spec.validate()
    assert spec.to_dict()["targetPortNumber"] == 8000


def test_pool_spec_requires_extension():
    spec = InferencePoolSpec(selector={"app": "x"}, target_port_number=8000)
    with pytest.raises(ValidationError):
        spec.validate()


@pytest.mark.parametrize("key", ["example~", "example.com."])
def test_pool_spec_bad_label_key(key):
    spec = make_pool().spec
    spec.selector = {key: "value"}
    with pytest.raises(ValidationError):
        spec.validate()


def test_pool_spec_bad_label_value():
    spec = make_pool().spec
    spec.selector = {"app": "-bad"}
    with pytest.raises(ValidationError):
        spec.validate()


def test_pool_spec_accepts_documented_label_keys():
    spec = make_pool().spec
    spec.selector = {
        "example": "MyValue",
        "example.com": "my.name",
        "example.com/path": "123-my-value",
    }
    spec.validate()
    assert InferencePoolSpec.from_dict(spec.to_dict()) == spec


@pytest.mark.parametrize("port", [0, 65536])
def test_pool_spec_bad_target_port(port):
    spec = make_pool().spec
    spec.target_port_number = port
    with pytest.raises(ValidationError):
        spec.validate()


def test_pool_spec_requires_selector():
    with pytest.raises(ValidationError):
        InferencePoolSpec.from_dict({"targetPortNumber": 8000})


def test_pool_status_default_condition():
    status = PoolStatus()
    assert len(status.conditions) == 1
    condition = status.conditions[0]
    assert condition.type == PoolConditionType.ACCEPTED.value
    assert condition.status is ConditionStatus.UNKNOWN
    assert condition.reason == PoolReason.PENDING.value
    assert condition.message == "Waiting for controller"


def test_pool_status_wire_keys():
    status = PoolStatus(gateway_ref=ObjectReference(kind="Gateway", name="gw"))
    wire = status.to_dict()
    assert wire["parentRef"] == {"kind": "Gateway", "name": "gw"}
    assert wire["conditions"][0]["reason"] == "Pending"


def test_pool_status_round_trip():
    status = PoolStatus(
        gateway_ref=ObjectReference(kind="Gateway", name="gw", namespace="default"),
        conditions=[
            Condition(
                type=PoolConditionType.ACCEPTED,
                status=ConditionStatus.FALSE,
                reason=PoolReason.NOT_SUPPORTED_BY_GATEWAY,
            )
        ],
    )
    restored = PoolStatus.from_dict(status.to_dict())
    assert restored == status
    assert restored.conditions[0].reason == "NotSupportedByGateway"


def test_pool_status_duplicate_conditions():
    status = PoolStatus(
        conditions=[
            Condition(type="Accepted", status="True", reason="Accepted"),
            Condition(type="Accepted", status="False", reason="Pending"),
        ]
    )
    with pytest.raises(ValidationError):
        status.validate()


def test_pool_status_too_many_conditions():
    status = PoolStatus(
        conditions=[
            Condition(type=f"Type{i}", status="True", reason="Accepted") for i in range(9)
        ]
    )
    with pytest.raises(ValidationError):
        status.validate()


def test_inference_pool_status_empty_wire_form():
    assert InferencePoolStatus().to_dict() == {}


def test_inference_pool_status_too_many_parents():
    status = InferencePoolStatus(parents=[PoolStatus() for _ in range(33)])
    with pytest.raises(ValidationError):
        status.validate()


def test_inference_pool_status_parent_key():
    status = InferencePoolStatus(parents=[PoolStatus()])
    wire = status.to_dict()
    assert list(wire) == ["parent"]
    assert InferencePoolStatus.from_dict(wire) == status


def test_inference_pool_round_trip():
    pool = make_pool()
    pool.status.parents.append(PoolStatus(gateway_ref=ObjectReference(name="gw")))
    pool.validate()
    wire = pool.to_dict()
    assert wire["kind"] == "InferencePool"
    assert wire["apiVersion"] == "inference.networking.x-k8s.io/v1alpha2"
    assert InferencePool.from_dict(wire) == pool


def test_inference_pool_rejects_other_kind():
    wire = make_pool().to_dict()
    wire["kind"] = "InferenceModel"
    with pytest.raises(ValidationError):
        InferencePool.from_dict(wire)


def test_inference_pool_requires_spec():
    with pytest.raises(ValidationError):
        InferencePool.from_dict({"kind": "InferencePool", "metadata": {"name": "p"}})


def test_inference_pool_list_round_trip():
    pools = InferencePoolList(
        items=[make_pool("a"), make_pool("b")], resource_version="42"
    )
    wire = pools.to_dict()
    assert wire["kind"] == "InferencePoolList"
    restored = InferencePoolList.from_dict(wire)
    assert restored == pools
    assert [pool.metadata.name for pool in restored] == ["a", "b"]
    assert len(restored) == 2


def test_inference_pool_list_rejects_other_kind():
    with pytest.raises(ValidationError):
        InferencePoolList.from_dict({"kind": "InferenceModelList", "items": []})