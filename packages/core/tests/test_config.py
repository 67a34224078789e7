from pathlib import Path

import pytest

from glm_tokens import GlmTokensConfig, bundled_template_path, bundled_tokenizer_path


def test_defaults_point_at_bundled_assets() -> None:
    config = GlmTokensConfig()
    assert config.tokenizer_path == bundled_tokenizer_path()
    assert config.template_path == bundled_template_path()
    assert config.max_workers is None
    assert bundled_template_path().exists()


def test_env_overrides_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("GLM_TOKENS_TOKENIZER_PATH", "/tmp/tok.json")
    monkeypatch.setenv("GLM_TOKENS_TEMPLATE_PATH", "/tmp/chat.jinja")
    monkeypatch.setenv("GLM_TOKENS_MAX_WORKERS", "4")

    config = GlmTokensConfig.from_env()
    assert config.tokenizer_path == Path("/tmp/tok.json")
    assert config.template_path == Path("/tmp/chat.jinja")
    assert config.max_workers == 4


def test_explicit_values_win_over_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("GLM_TOKENS_TOKENIZER_PATH", "/tmp/tok.json")
    monkeypatch.setenv("GLM_TOKENS_MAX_WORKERS", "4")

    config = GlmTokensConfig.from_env(tokenizer_path="/srv/glm.json", max_workers=2)
    assert config.tokenizer_path == Path("/srv/glm.json")
    assert config.max_workers == 2


def test_empty_env_falls_back_to_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("GLM_TOKENS_TEMPLATE_PATH", "")
    monkeypatch.setenv("GLM_TOKENS_MAX_WORKERS", "")
    config = GlmTokensConfig.from_env()
    assert config.template_path == bundled_template_path()
    assert config.max_workers is None


@pytest.mark.parametrize("value", ["zero", "0", "-2"])
def test_invalid_max_workers(monkeypatch: pytest.MonkeyPatch, value: str) -> None:
    monkeypatch.setenv("GLM_TOKENS_MAX_WORKERS", value)
    with pytest.raises(ValueError, match="max_workers"):
        GlmTokensConfig.from_env()
