"""glm-tokens: count GLM-4.6 tokens for raw text and chat conversations."""

from .config import GlmTokensConfig, bundled_template_path, bundled_tokenizer_path
from .encoder import Encoder, EncoderInput, get_encoder
from .errors import (
    EncoderLoadError,
    ErrorKind,
    GlmTokensError,
    TemplateError,
    ThreadPoolError,
    TokenizationError,
)
from .offload import WorkerPool, get_pool, set_default_pool
from .template import ChatTemplate, get_chat_template
from .tokens import glm, glm_chat, glm_chat_sync, glm_sync
from .types import ChatMessage, Role

__all__ = [
    # pipeline
    "glm",
    "glm_chat",
    "glm_sync",
    "glm_chat_sync",
    # types
    "ChatMessage",
    "Role",
    # encoder
    "Encoder",
    "EncoderInput",
    "get_encoder",
    # template
    "ChatTemplate",
    "get_chat_template",
    # offload
    "WorkerPool",
    "get_pool",
    "set_default_pool",
    # config
    "GlmTokensConfig",
    "bundled_template_path",
    "bundled_tokenizer_path",
    # errors
    "ErrorKind",
    "GlmTokensError",
    "TokenizationError",
    "ThreadPoolError",
    "TemplateError",
    "EncoderLoadError",
]
