"""GLM chat template rendering."""

from __future__ import annotations

import json
import logging
import os
import threading
from collections.abc import Iterable, Mapping
from pathlib import Path
from typing import Any

import jinja2
from jinja2 import ext

from .config import GlmTokensConfig
from .errors import TemplateError
from .pycompat import PyCompatEnvironment
from .types import ChatMessage

__all__ = ["ChatTemplate", "get_chat_template"]

logger = logging.getLogger("glm_tokens")


def _raise_exception(message: str) -> None:
    raise jinja2.exceptions.TemplateError(message)


def _tojson(value: Any, indent: int | None = None, ensure_ascii: bool = False) -> str:
    return json.dumps(value, indent=indent, ensure_ascii=ensure_ascii)


def _to_context(message: ChatMessage | Mapping[str, Any]) -> Mapping[str, Any]:
    if isinstance(message, ChatMessage):
        return message.to_template()
    return message


class ChatTemplate:
    """A compiled chat template.

    Compilation happens once in ``__init__``; the compiled program is never
    mutated afterwards, so one instance may render from many threads.
    """

    def __init__(self, source: str, name: str = "chat") -> None:
        self.name = name
        env = PyCompatEnvironment(
            trim_blocks=True,
            lstrip_blocks=True,
            extensions=[ext.loopcontrols],
        )
        env.filters["tojson"] = _tojson
        env.globals["raise_exception"] = _raise_exception
        try:
            self._template = env.from_string(source)
        except jinja2.TemplateError as exc:
            raise TemplateError(exc) from exc
        logger.debug("[glm-tokens] Compiled chat template %r", name)

    @classmethod
    def from_file(cls, path: str | os.PathLike[str]) -> ChatTemplate:
        path = Path(path)
        return cls(path.read_text(encoding="utf-8"), name=path.name)

    def render(
        self,
        messages: Iterable[ChatMessage | Mapping[str, Any]],
        add_generation_prompt: bool = True,
        **extra: Any,
    ) -> str:
        """Render ``messages`` into the exact text the model sees.

        ``extra`` is merged into the template context (e.g. ``tools`` or
        ``enable_thinking`` for the GLM template).
        """
        context = dict(extra)
        context["messages"] = [_to_context(m) for m in messages]
        context["add_generation_prompt"] = add_generation_prompt
        try:
            return self._template.render(context)
        except jinja2.TemplateError as exc:
            raise TemplateError(exc) from exc
        except Exception as exc:
            # Python errors raised by template expressions (e.g. an index
            # out of range) are evaluation faults of the template.
            raise TemplateError(f"{type(exc).__name__}: {exc}") from exc

    def __repr__(self) -> str:
        return f"ChatTemplate(name={self.name!r})"


# ---------------------------------------------------------------------------
# Default GLM template
# ---------------------------------------------------------------------------

_chat_template: ChatTemplate | None = None
_chat_template_lock = threading.Lock()


def get_chat_template() -> ChatTemplate:
    """Return the shared GLM-4.6 chat template, compiling it on first use."""
    global _chat_template
    if _chat_template is not None:
        return _chat_template
    with _chat_template_lock:
        if _chat_template is None:
            path = GlmTokensConfig.from_env().template_path
            try:
                template = ChatTemplate.from_file(path)
            except OSError as exc:
                raise TemplateError(f"cannot read {path}: {exc}") from exc
            _chat_template = template
        return _chat_template
