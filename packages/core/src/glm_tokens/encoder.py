"""GLM vocabulary and BPE encoder.

The encoder is a thin wrapper around a HuggingFace ``tokenizers.Tokenizer``.
Encoding is read-only, so one instance is shared by every worker thread.
"""

from __future__ import annotations

import logging
import os
import threading
from collections.abc import Sequence

from tokenizers import Tokenizer

from .config import GlmTokensConfig
from .errors import EncoderLoadError, TokenizationError, is_panic

__all__ = ["Encoder", "EncoderInput", "get_encoder"]

logger = logging.getLogger("glm_tokens")

# Raw text, or a sequence of already split words.
EncoderInput = str | Sequence[str]


class Encoder:
    """Compiled tokenizer model (vocabulary + merge rules)."""

    def __init__(self, tokenizer: Tokenizer) -> None:
        self._tokenizer = tokenizer

    @classmethod
    def from_file(cls, path: str | os.PathLike[str]) -> Encoder:
        return cls(Tokenizer.from_file(os.fspath(path)))

    @classmethod
    def from_str(cls, data: str) -> Encoder:
        return cls(Tokenizer.from_str(data))

    @classmethod
    def from_bytes(cls, data: bytes) -> Encoder:
        return cls(Tokenizer.from_buffer(data))

    @property
    def vocab_size(self) -> int:
        return self._tokenizer.get_vocab_size(with_added_tokens=True)

    def encode(self, input: EncoderInput, add_special_tokens: bool = False) -> list[int]:
        """Encode ``input`` into token ids.

        A ``str`` is encoded as raw text; any other sequence is treated as
        pre-tokenized words. Special tokens from the post-processor are only
        added when asked for; control tokens already present in the text
        (e.g. emitted by the chat template) are always recognised.
        """
        pretokenized = not isinstance(input, str)
        if pretokenized:
            if not isinstance(input, Sequence) or isinstance(input, (bytes, bytearray)):
                raise TokenizationError(
                    f"expected text or a sequence of words, got {type(input).__name__}"
                )
            input = list(input)
            for word in input:
                if not isinstance(word, str):
                    raise TokenizationError(
                        f"pre-tokenized words must be text, got {type(word).__name__}"
                    )
        try:
            encoding = self._tokenizer.encode(
                input,
                is_pretokenized=pretokenized,
                add_special_tokens=add_special_tokens,
            )
        except Exception as exc:
            raise TokenizationError(exc) from exc
        except BaseException as exc:
            if not is_panic(exc):
                raise
            raise TokenizationError(exc) from exc
        return encoding.ids

    def count(self, input: EncoderInput) -> int:
        return len(self.encode(input, add_special_tokens=False))

    def __repr__(self) -> str:
        return f"Encoder(vocab_size={self.vocab_size})"


# ---------------------------------------------------------------------------
# Process-wide singleton
# ---------------------------------------------------------------------------

_encoder: Encoder | None = None
_encoder_lock = threading.Lock()


def get_encoder() -> Encoder:
    """Return the shared GLM encoder, loading it on first use.

    Concurrent first calls race on the lock; exactly one of them reads the
    asset. Reads after that take no lock.
    """
    global _encoder
    if _encoder is not None:
        return _encoder
    with _encoder_lock:
        if _encoder is None:
            path = GlmTokensConfig.from_env().tokenizer_path
            try:
                encoder = Encoder.from_file(path)
            except Exception as exc:
                raise EncoderLoadError(f"Failed to load tokenizer from {path}: {exc}") from exc
            logger.info(
                "[glm-tokens] Loaded tokenizer from %s (vocab_size=%d)", path, encoder.vocab_size
            )
            _encoder = encoder
        return _encoder
