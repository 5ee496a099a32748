import json

import pytest

from student_knn.config import CONFIG_ENV_VAR, Settings, load_config, save_config


def test_defaults(monkeypatch):
    monkeypatch.delenv(CONFIG_ENV_VAR, raising=False)
    settings = load_config()
    assert settings == Settings()
    assert settings.k == 5
    assert settings.train_ratio == 0.8
    assert settings.port == 8080


def test_load_from_file(tmp_path):
    path = tmp_path / "config.json"
    path.write_text(json.dumps({"k": 7, "seed": 3}))
    settings = load_config(str(path))
    assert settings.k == 7
    assert settings.seed == 3
    assert settings.n_samples == 200


def test_env_var(tmp_path, monkeypatch):
    path = tmp_path / "config.json"
    save_config(Settings(port=9000), str(path))
    monkeypatch.setenv(CONFIG_ENV_VAR, str(path))
    assert load_config().port == 9000


def test_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_config(str(tmp_path / "nope.json"))


def test_unknown_keys(tmp_path):
    path = tmp_path / "config.json"
    path.write_text(json.dumps({"neighbours": 3}))
    with pytest.raises(ValueError, match="neighbours"):
        load_config(str(path))


def test_overrides_skip_none():
    settings = Settings().with_overrides(k=3, port=None)
    assert settings.k == 3
    assert settings.port == 8080
