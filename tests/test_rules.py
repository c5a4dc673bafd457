from vto_normalizer.rules import _env_int


def test_env_int_reads_value(monkeypatch):
    monkeypatch.setenv("VTO_MAX_UPLOAD_BYTES", " 2048 ")
    assert _env_int("VTO_MAX_UPLOAD_BYTES", 5) == 2048


def test_env_int_falls_back_on_malformed_value(monkeypatch):
    monkeypatch.setenv("VTO_MAX_UPLOAD_BYTES", "1MB")
    assert _env_int("VTO_MAX_UPLOAD_BYTES", 5) == 5


def test_env_int_falls_back_when_unset(monkeypatch):
    monkeypatch.delenv("VTO_MAX_UPLOAD_BYTES", raising=False)
    assert _env_int("VTO_MAX_UPLOAD_BYTES", 5) == 5
    monkeypatch.setenv("VTO_MAX_UPLOAD_BYTES", "")
    assert _env_int("VTO_MAX_UPLOAD_BYTES", 5) == 5
