import pytest

from chainflow.config import Settings


def test_validate_requires_token(monkeypatch):
    cfg = Settings()
    monkeypatch.setattr(cfg, "BOT_TOKEN", "")
    with pytest.raises(RuntimeError, match="BOT_TOKEN"):
        cfg.validate()


def test_validate_with_token(monkeypatch):
    cfg = Settings()
    monkeypatch.setattr(cfg, "BOT_TOKEN", "42:abc")
    cfg.validate()


def test_defaults():
    cfg = Settings()
    assert cfg.LOG_FILE
    assert cfg.LOG_LEVEL == cfg.LOG_LEVEL.upper()
    assert isinstance(cfg.SERIALIZE_UPDATES, bool)
