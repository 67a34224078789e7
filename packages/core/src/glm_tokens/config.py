"""Configuration for asset locations and the worker pool."""

from __future__ import annotations

import os
from pathlib import Path

__all__ = [
    "ASSETS_DIR",
    "DEFAULT_TEMPLATE_FILE",
    "DEFAULT_TOKENIZER_FILE",
    "GlmTokensConfig",
    "bundled_template_path",
    "bundled_tokenizer_path",
]

ASSETS_DIR = Path(__file__).parent / "assets"
DEFAULT_TOKENIZER_FILE = "glm.json"
DEFAULT_TEMPLATE_FILE = "glm_4_6_chat_template.jinja"

_ENV_TOKENIZER_PATH = "GLM_TOKENS_TOKENIZER_PATH"
_ENV_TEMPLATE_PATH = "GLM_TOKENS_TEMPLATE_PATH"
_ENV_MAX_WORKERS = "GLM_TOKENS_MAX_WORKERS"


def bundled_tokenizer_path() -> Path:
    return ASSETS_DIR / DEFAULT_TOKENIZER_FILE


def bundled_template_path() -> Path:
    return ASSETS_DIR / DEFAULT_TEMPLATE_FILE


def _parse_max_workers(value: str | int | None) -> int | None:
    if value is None or value == "":
        return None
    try:
        workers = int(value)
    except (TypeError, ValueError):
        raise ValueError(f"max_workers must be an integer, got {value!r}") from None
    if workers <= 0:
        raise ValueError(f"max_workers must be positive, got {workers}")
    return workers


class GlmTokensConfig:
    """Where the bundled assets live and how large the worker pool is.

    Explicit arguments win over environment variables, which win over the
    bundled defaults. ``max_workers=None`` leaves sizing to
    ``ThreadPoolExecutor``.
    """

    def __init__(
        self,
        tokenizer_path: str | os.PathLike[str] | None = None,
        template_path: str | os.PathLike[str] | None = None,
        max_workers: int | None = None,
        thread_name_prefix: str = "glm-tokens",
    ) -> None:
        self.tokenizer_path = Path(tokenizer_path) if tokenizer_path else bundled_tokenizer_path()
        self.template_path = Path(template_path) if template_path else bundled_template_path()
        self.max_workers = _parse_max_workers(max_workers)
        self.thread_name_prefix = thread_name_prefix

    @classmethod
    def from_env(
        cls,
        tokenizer_path: str | os.PathLike[str] | None = None,
        template_path: str | os.PathLike[str] | None = None,
        max_workers: int | None = None,
    ) -> GlmTokensConfig:
        return cls(
            tokenizer_path=tokenizer_path or os.environ.get(_ENV_TOKENIZER_PATH) or None,
            template_path=template_path or os.environ.get(_ENV_TEMPLATE_PATH) or None,
            max_workers=(
                max_workers
                if max_workers is not None
                else _parse_max_workers(os.environ.get(_ENV_MAX_WORKERS))
            ),
        )

    def __repr__(self) -> str:
        return (
            f"GlmTokensConfig(tokenizer_path={str(self.tokenizer_path)!r}, "
            f"template_path={str(self.template_path)!r}, max_workers={self.max_workers!r})"
        )
