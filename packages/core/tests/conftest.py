"""Shared fixtures.

The real GLM tokenizer asset is several megabytes and is not needed to test
the pipeline's behaviour, so the session runs against a small byte-level BPE
trained here. It knows the GLM control markers as special tokens, like the
real vocabulary does.
"""

from __future__ import annotations

import pytest
from tokenizers import Tokenizer, decoders, models, pre_tokenizers, trainers

from glm_tokens import Encoder, WorkerPool, bundled_tokenizer_path
from glm_tokens import encoder as encoder_module

GLM_CONTROL_TOKENS = [
    "[gMASK]",
    "<sop>",
    "<|system|>",
    "<|user|>",
    "<|assistant|>",
    "<|observation|>",
    "<think>",
    "</think>",
    "<tool_response>",
    "</tool_response>",
]

_CORPUS = [
    "Hello, world! Hello there, how are you today?",
    "Hi there! I am fine, thank you for asking.",
    "The quick brown fox jumps over the lazy dog.",
    "Token counting keeps prompts inside the context window.",
    "You are a helpful assistant. Answer the question briefly.",
] * 20


def build_test_tokenizer() -> Tokenizer:
    tokenizer = Tokenizer(models.BPE())
    tokenizer.pre_tokenizer = pre_tokenizers.ByteLevel(add_prefix_space=False)
    tokenizer.decoder = decoders.ByteLevel()
    trainer = trainers.BpeTrainer(
        vocab_size=320,
        special_tokens=GLM_CONTROL_TOKENS,
        initial_alphabet=pre_tokenizers.ByteLevel.alphabet(),
        show_progress=False,
    )
    tokenizer.train_from_iterator(_CORPUS, trainer=trainer)
    return tokenizer


@pytest.fixture(scope="session", autouse=True)
def tokenizer_path(tmp_path_factory: pytest.TempPathFactory):
    """Point the shared encoder at the test tokenizer for the whole session."""
    path = tmp_path_factory.mktemp("assets") / "tokenizer.json"
    build_test_tokenizer().save(str(path))

    mp = pytest.MonkeyPatch()
    mp.setenv("GLM_TOKENS_TOKENIZER_PATH", str(path))
    mp.setattr(encoder_module, "_encoder", None)
    yield path
    mp.undo()


@pytest.fixture
def encoder(tokenizer_path) -> Encoder:
    return Encoder.from_file(tokenizer_path)


@pytest.fixture
def pool():
    p = WorkerPool(max_workers=2, thread_name_prefix="glm-tokens-test")
    yield p
    p.shutdown()


@pytest.fixture(scope="session")
def glm_encoder() -> Encoder:
    """The bundled GLM tokenizer; skips when the asset has not been fetched."""
    path = bundled_tokenizer_path()
    if not path.exists():
        pytest.skip(f"GLM tokenizer asset not present at {path}")
    return Encoder.from_file(path)


class PanicException(BaseException):
    """Same shape as ``pyo3_runtime.PanicException``: not an ``Exception``."""


class PanickingTokenizer:
    def __init__(self, exc: BaseException | None = None) -> None:
        self.exc = exc or PanicException("called `Result::unwrap()` on an `Err` value")

    def encode(self, *args, **kwargs):
        raise self.exc

    def get_vocab_size(self, with_added_tokens: bool = True) -> int:
        return 0


@pytest.fixture
def panicking_encoder() -> Encoder:
    return Encoder(PanickingTokenizer())


@pytest.fixture
def panic_exception() -> type[BaseException]:
    return PanicException
