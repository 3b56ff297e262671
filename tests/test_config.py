import json
from pathlib import Path

import pytest

from filesizehist.config import (
    CACHE_ENV_VAR,
    HistogramConfig,
    ImageSource,
    apply_overrides,
    default_cache_path,
    load_config,
    parse_image_spec,
)
from filesizehist.errors import ConfigError


def write_config(tmp_path, payload) -> Path:
    path = tmp_path / "config.json"
    path.write_text(json.dumps(payload), encoding="utf-8")
    return path


def test_defaults():
    config = load_config(environ={})
    assert config.cache_path == default_cache_path()
    assert config.cache_path.name == "imageData.json"
    assert config.images == ()
    assert config.rescan_on_corrupt is False


def test_config_file(tmp_path):
    path = write_config(tmp_path, {
        "cache_path": str(tmp_path / "cache.json"),
        "images": [{"name": "Test Image", "root": "/data/installation"}],
        "rescan_on_corrupt": True,
    })
    config = load_config(path, environ={})
    assert config.cache_path == tmp_path / "cache.json"
    assert config.images == (ImageSource("Test Image", Path("/data/installation")),)
    assert config.rescan_on_corrupt is True


def test_environment_overrides_file(tmp_path):
    path = write_config(tmp_path, {"cache_path": str(tmp_path / "from-file.json")})
    config = load_config(path, environ={CACHE_ENV_VAR: str(tmp_path / "from-env.json")})
    assert config.cache_path == tmp_path / "from-env.json"


def test_environment_defaults_to_os_environ(tmp_path, monkeypatch):
    monkeypatch.setenv(CACHE_ENV_VAR, str(tmp_path / "env.json"))
    assert load_config().cache_path == tmp_path / "env.json"


@pytest.mark.parametrize("payload", [
    [],
    {"cache_path": 5},
    {"cache_path": ""},
    {"images": {"name": "x"}},
    {"images": [{"name": "x"}]},
    {"images": [{"name": "", "root": "/tmp"}]},
    {"images": ["x=/tmp"]},
    {"images": [{"name": "x", "root": "/a"}, {"name": "x", "root": "/b"}]},
    {"rescan_on_corrupt": "yes"},
])
def test_malformed_config(tmp_path, payload):
    with pytest.raises(ConfigError):
        load_config(write_config(tmp_path, payload), environ={})


def test_missing_config_file(tmp_path):
    with pytest.raises(ConfigError, match="not found"):
        load_config(tmp_path / "nope.json", environ={})


def test_invalid_json_config(tmp_path):
    path = tmp_path / "config.json"
    path.write_text("{", encoding="utf-8")
    with pytest.raises(ConfigError):
        load_config(path, environ={})


def test_parse_image_spec():
    assert parse_image_spec("Test Image=/data/x") == ImageSource("Test Image", Path("/data/x"))
    assert parse_image_spec("/data/photos") == ImageSource("photos", Path("/data/photos"))
    with pytest.raises(ConfigError):
        parse_image_spec("=/data/x")
    with pytest.raises(ConfigError):
        parse_image_spec("name=")


def test_apply_overrides(tmp_path):
    base = HistogramConfig(cache_path=tmp_path / "a.json", images=(ImageSource("a", Path("/a")),))
    assert apply_overrides(base) is base
    assert apply_overrides(base, images=[]) is base

    updated = apply_overrides(
        base,
        cache_path=tmp_path / "b.json",
        images=[ImageSource("b", Path("/b"))],
        rescan_on_corrupt=True,
    )
    assert updated.cache_path == tmp_path / "b.json"
    assert updated.images == (ImageSource("b", Path("/b")),)
    assert updated.rescan_on_corrupt is True
    assert base.cache_path == tmp_path / "a.json"


def test_apply_overrides_rejects_duplicate_images():
    with pytest.raises(ConfigError):
        apply_overrides(HistogramConfig(), images=[ImageSource("x", Path("/a")), ImageSource("x", Path("/b"))])
