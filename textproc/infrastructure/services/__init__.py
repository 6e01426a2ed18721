"""
Infrastructure Services (barrel)

Expone los adapters de transformación y la política de retry.
"""

from .retry import create_retry_decorator, is_transient_error
from .transformers import (
    AnthropicTextTransformer,
    AzureOpenAITextTransformer,
    DemoTextTransformer,
    GoogleTextTransformer,
    HuggingFaceTextTransformer,
    LocalLLMTransformer,
    OpenAITextTransformer,
)

__all__ = [
    "create_retry_decorator",
    "is_transient_error",
    "AnthropicTextTransformer",
    "AzureOpenAITextTransformer",
    "DemoTextTransformer",
    "GoogleTextTransformer",
    "HuggingFaceTextTransformer",
    "LocalLLMTransformer",
    "OpenAITextTransformer",
]
