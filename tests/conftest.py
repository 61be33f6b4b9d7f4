import pytest

from treediff.config import load_config, refresh_config


@pytest.fixture(autouse=True)
def clear_treediff_env(monkeypatch):
    for key in [
        "TREEDIFF_OUTPUT_FORMAT",
        "TREEDIFF_INDENT",
        "TREEDIFF_FACTOR_MOVES",
        "TREEDIFF_KEY_FIELDS",
    ]:
        monkeypatch.delenv(key, raising=False)


@pytest.fixture(autouse=True)
def isolated_config(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    refresh_config()
    yield
    load_config.cache_clear()


@pytest.fixture
def write_json(tmp_path):
    import json

    def _write(name, payload):
        path = tmp_path / name
        path.write_text(json.dumps(payload), encoding="utf-8")
        return str(path)

    return _write
