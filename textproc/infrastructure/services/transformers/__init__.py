"""Adapters de TextTransformer (Gemini, OpenAI/Azure, Anthropic, Hugging Face, LLM local, demo)."""

from .anthropic_transformer import AnthropicTextTransformer
from .demo_transformer import DemoTextTransformer
from .google_transformer import MODEL_ALIASES, GoogleTextTransformer
from .huggingface_transformer import HuggingFaceTextTransformer
from .local_transformer import LocalLLMTransformer
from .openai_transformer import AzureOpenAITextTransformer, OpenAITextTransformer

__all__ = [
    "AnthropicTextTransformer",
    "AzureOpenAITextTransformer",
    "DemoTextTransformer",
    "GoogleTextTransformer",
    "HuggingFaceTextTransformer",
    "LocalLLMTransformer",
    "MODEL_ALIASES",
    "OpenAITextTransformer",
]
