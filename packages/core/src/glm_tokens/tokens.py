"""Token counting entry points.

``glm`` counts raw text; ``glm_chat`` renders a conversation through the
GLM-4.6 chat template first. Both run their work on a ``WorkerPool`` so the
caller's event loop is only suspended once, while awaiting the result.
"""

from __future__ import annotations

from collections.abc import Sequence

from ._sync import run_sync
from .encoder import Encoder, EncoderInput, get_encoder
from .offload import WorkerPool, get_pool
from .template import ChatTemplate, get_chat_template
from .types import ChatMessage

__all__ = ["glm", "glm_chat", "glm_sync", "glm_chat_sync"]


async def glm(
    input: EncoderInput,
    *,
    encoder: Encoder | None = None,
    pool: WorkerPool | None = None,
) -> int:
    """Count GLM tokens in raw text (no chat template).

    ``input`` may also be a sequence of pre-split words.

    Raises:
        TokenizationError: the encoder rejected the input.
        ThreadPoolError: the worker pool could not run the task.
    """
    pool = pool or get_pool()

    def count() -> int:
        return (encoder or get_encoder()).count(input)

    return await pool.run(count)


async def glm_chat(
    messages: Sequence[ChatMessage],
    *,
    encoder: Encoder | None = None,
    template: ChatTemplate | None = None,
    pool: WorkerPool | None = None,
) -> int:
    """Count GLM tokens for a conversation with the chat template applied.

    The generation prompt is always appended, so the count covers
    everything the model reads before it starts answering.

    Raises:
        TemplateError: the template failed to compile or render.
        TokenizationError: the encoder rejected the rendered text.
        ThreadPoolError: the worker pool could not run the task.
    """
    pool = pool or get_pool()
    messages = list(messages)

    def count() -> int:
        formatted = (template or get_chat_template()).render(
            messages, add_generation_prompt=True
        )
        return (encoder or get_encoder()).count(formatted)

    return await pool.run(count)


def glm_sync(
    input: EncoderInput,
    *,
    encoder: Encoder | None = None,
    pool: WorkerPool | None = None,
) -> int:
    """Blocking variant of :func:`glm`."""
    return run_sync(glm(input, encoder=encoder, pool=pool))


def glm_chat_sync(
    messages: Sequence[ChatMessage],
    *,
    encoder: Encoder | None = None,
    template: ChatTemplate | None = None,
    pool: WorkerPool | None = None,
) -> int:
    """Blocking variant of :func:`glm_chat`."""
    return run_sync(glm_chat(messages, encoder=encoder, template=template, pool=pool))
