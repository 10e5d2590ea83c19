# inferenceapi

Python data models for the `inference.networking.x-k8s.io/v1alpha2` resources
`InferencePool` and `InferenceModel`. Each model converts to and from the plain
dictionaries found in Kubernetes manifests. Each model also checks the limits
that the resource schema sets: field lengths, patterns, numeric ranges and list
sizes. The package has no dependencies outside the standard library.

## Installation

```
pip install .
```

To run the tests:

```
pip install ".[test]"
pytest
```

## Modules

- `inferenceapi.shared_types` holds the checks for shared value types:
  `validate_group`, `validate_kind`, `validate_object_name`,
  `validate_port_number`, `validate_label_key` and `validate_label_value`.
  - Each check returns the value when it is valid.
  - A value that breaks a rule raises `ValidationError`, which is a subclass of
    `ValueError`.
  - A value of the wrong type raises `TypeError`.
- `inferenceapi.meta` holds the metadata and status building blocks: `ObjectMeta`,
  `Condition`, `ConditionStatus` and `ObjectReference`.
  - Each class has `to_dict` and `from_dict`.
  - `pending_condition(condition_type)` builds the default condition: status
    `Unknown`, reason `Pending`, message "Waiting for controller", and a
    transition time of 1970-01-01T00:00:00Z.
  - The module also defines `GROUP`, `VERSION` and `API_VERSION`.
- `inferenceapi.inference_model` holds `InferenceModel`, `InferenceModelSpec`,
  `InferenceModelStatus`, `InferenceModelList`, `TargetModel` and
  `PoolObjectReference`. It also holds the `Criticality`, `ModelConditionType` and
  `ModelConditionReason` enums.
- `inferenceapi.inference_pool` holds `InferencePool`, `InferencePoolSpec`,
  `InferencePoolStatus`, `InferencePoolList`, `PoolStatus`, `Extension` and
  `ExtensionReference`. It also holds the `ExtensionFailureMode`,
  `PoolConditionType` and `PoolReason` enums.

The resource, spec and status classes have a `validate()` method. It raises
`ValidationError` on the first rule that is broken. The list classes can be
iterated over and passed to `len()`. `from_dict` on a resource or a list raises
`ValidationError` when the document's `kind` is a different kind or a required
field is missing.

## Example

```python
from inferenceapi.inference_model import InferenceModel

manifest = {
    "apiVersion": "inference.networking.x-k8s.io/v1alpha2",
    "kind": "InferenceModel",
    "metadata": {"name": "food-review", "namespace": "default"},
    "spec": {
        "modelName": "food-review",
        "criticality": "Critical",
        "poolRef": {"name": "vllm-llama3-8b-instruct"},
        "targetModels": [
            {"name": "food-review-1", "weight": 50},
            {"name": "food-review-2", "weight": 50},
        ],
    },
}

model = InferenceModel.from_dict(manifest)
model.validate()          # raises ValidationError on a bad field
print(model.to_dict())    # back to a manifest dictionary
```

### Defaults and validation rules

- A pool reference with no `group` or `kind` falls back to
  `inference.networking.x-k8s.io` and `InferencePool`.
- Setting `weight` on some target models and leaving it out on others is an
  error.
- A weight must be between 1 and 1,000,000.
- An `InferenceModelSpec` may hold at most 10 target models.
- A status with no `conditions` field gets a single pending condition. For an
  `InferenceModel` its type is `Ready`. For each `PoolStatus` its type is
  `Accepted`.
- An `Extension` read without a `failureMode` uses `FailClose`.
- An `InferencePoolSpec` fails validation when it has no extension reference.

If an extension reference gives no port and its kind is `Service`, it falls back
to 9002. `Service` is also the default kind:

```python
from inferenceapi.inference_pool import ExtensionReference

ref = ExtensionReference(name="my-epp")
print(ref.effective_port())   # 9002
```

## What this package does not do

This package only models the resources and checks them. It does not:

- talk to a Kubernetes cluster;
- read or write YAML files;
- run a controller that reconciles resources;
- pick endpoints or route inference requests.

To use it with manifests, parse them into dictionaries with a YAML library of
your choice, then pass those dictionaries to `from_dict`.