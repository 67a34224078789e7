"""Error taxonomy for the token counting pipeline.

Every pipeline failure is one of three tagged cases. The ``kind`` attribute
tells callers which stage failed without isinstance checks on every subclass.
"""

from __future__ import annotations

from typing import Literal

ErrorKind = Literal["tokenization", "thread_pool", "template"]

__all__ = [
    "ErrorKind",
    "GlmTokensError",
    "TokenizationError",
    "ThreadPoolError",
    "TemplateError",
    "EncoderLoadError",
    "is_panic",
]


class GlmTokensError(Exception):
    """Base class for errors returned by ``glm`` / ``glm_chat``."""

    kind: ErrorKind

    def __init__(self, detail: object = None) -> None:
        self.detail = detail
        super().__init__(self._format(detail))

    def _format(self, detail: object) -> str:
        if detail is None:
            return "Failed to count tokens"
        return f"Failed to count tokens: {detail}"


class TokenizationError(GlmTokensError):
    """The encoder failed on the given input."""

    kind: ErrorKind = "tokenization"

    def _format(self, detail: object) -> str:
        return f"Failed to tokenize input: {detail}"


class ThreadPoolError(GlmTokensError):
    """The worker pool could not run the submitted closure to completion."""

    kind: ErrorKind = "thread_pool"

    def _format(self, detail: object) -> str:
        if detail is None:
            return "Failed to run task on thread pool"
        return f"Failed to run task on thread pool: {detail}"


class TemplateError(GlmTokensError):
    """The chat template failed to compile or render."""

    kind: ErrorKind = "template"

    def _format(self, detail: object) -> str:
        return f"Failed to render chat template: {detail}"


class EncoderLoadError(RuntimeError):
    """The bundled tokenizer asset could not be loaded.

    Not part of the pipeline taxonomy: the asset ships with the package, so a
    load failure means a broken installation rather than bad input.
    """


def is_panic(exc: BaseException) -> bool:
    """True for ``pyo3_runtime.PanicException``, raised when the Rust tokenizer panics.

    It derives from ``BaseException``, so ``except Exception`` misses it.
    """
    return type(exc).__name__ == "PanicException"
