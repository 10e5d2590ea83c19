[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "inferenceapi"
version = "0.1.0"
description = "Typed models and validation for InferencePool and InferenceModel resources of the inference.networking.x-k8s.io API group"
requires-python = ">=3.10"
dependencies = []
keywords = ["kubernetes", "inference", "gateway", "crd", "llm", "validation"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Operating System :: OS Independent",
    "Topic :: Software Development :: Libraries :: Python Modules",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["inferenceapi"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
