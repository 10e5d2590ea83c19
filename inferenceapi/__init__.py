"""Data models, serialisation and validation for InferencePool and InferenceModel resources."""

__version__ = "0.1.0"
__all__ = ["shared_types", "meta", "inference_model", "inference_pool"]