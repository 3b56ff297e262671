"""
Configuration for the dataset registry.

Values are layered: built-in defaults, then an optional JSON config file, then
the ``FILESIZEHIST_CACHE`` environment variable, then command line overrides.
"""
from __future__ import annotations

import json
import os
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any, Iterable, Mapping, Optional, Sequence, Tuple

from .errors import ConfigError
from .json_handler import load_json_file

CACHE_ENV_VAR = 'FILESIZEHIST_CACHE'
CACHE_FILE_NAME = 'imageData.json'


def default_cache_path() -> Path:
    return Path.home() / '.filesizehist' / CACHE_FILE_NAME


@dataclass(frozen=True)
class ImageSource:
    """A named root directory to scan."""

    name: str
    root: Path


@dataclass(frozen=True)
class HistogramConfig:
    cache_path: Path = field(default_factory=default_cache_path)
    images: Tuple[ImageSource, ...] = ()
    rescan_on_corrupt: bool = False


def parse_image_spec(spec: str) -> ImageSource:
    """Parse ``NAME=PATH``; a bare path uses its directory name as the label."""
    if '=' in spec:
        name, _, root = spec.partition('=')
        name = name.strip()
        root = root.strip()
    else:
        root = spec.strip()
        name = Path(root).name or root
    if not name or not root:
        raise ConfigError(f"Invalid image specification {spec!r}; expected NAME=PATH")
    return ImageSource(name=name, root=Path(root).expanduser())


def _images_from_json(raw: Any, source: str) -> Tuple[ImageSource, ...]:
    if not isinstance(raw, list):
        raise ConfigError(f"{source}: 'images' must be a list")
    images = []
    for i, entry in enumerate(raw):
        if not isinstance(entry, Mapping):
            raise ConfigError(f"{source}: images[{i}] must be an object with 'name' and 'root'")
        name, root = entry.get('name'), entry.get('root')
        if not isinstance(name, str) or not name or not isinstance(root, str) or not root:
            raise ConfigError(f"{source}: images[{i}] requires non-empty string 'name' and 'root'")
        images.append(ImageSource(name=name, root=Path(root).expanduser()))
    return tuple(images)


def _check_unique(images: Sequence[ImageSource]) -> None:
    seen = set()
    for image in images:
        if image.name in seen:
            raise ConfigError(f"Duplicate image name {image.name!r}")
        seen.add(image.name)


def load_config(path: Optional[os.PathLike] = None, environ: Optional[Mapping[str, str]] = None) -> HistogramConfig:
    """
    Build a configuration from an optional JSON file and the environment.

    Args:
        path: JSON file with any of ``cache_path``, ``images`` and ``rescan_on_corrupt``.
        environ: Environment mapping (defaults to ``os.environ``).

    Raises:
        ConfigError: If the file is missing, unreadable or malformed.
    """
    environ = os.environ if environ is None else environ
    config = HistogramConfig()

    if path is not None:
        source = os.fspath(path)
        try:
            raw = load_json_file(source)
        except FileNotFoundError as e:
            raise ConfigError(f"Config file not found: {source}") from e
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise ConfigError(f"Config file {source} is not valid JSON: {e}") from e
        if not isinstance(raw, Mapping):
            raise ConfigError(f"{source}: top level must be an object")

        changes = {}
        if 'cache_path' in raw:
            if not isinstance(raw['cache_path'], str) or not raw['cache_path']:
                raise ConfigError(f"{source}: 'cache_path' must be a non-empty string")
            changes['cache_path'] = Path(raw['cache_path']).expanduser()
        if 'images' in raw:
            changes['images'] = _images_from_json(raw['images'], source)
        if 'rescan_on_corrupt' in raw:
            if not isinstance(raw['rescan_on_corrupt'], bool):
                raise ConfigError(f"{source}: 'rescan_on_corrupt' must be true or false")
            changes['rescan_on_corrupt'] = raw['rescan_on_corrupt']
        config = replace(config, **changes)

    env_cache = environ.get(CACHE_ENV_VAR)
    if env_cache:
        config = replace(config, cache_path=Path(env_cache).expanduser())

    _check_unique(config.images)
    return config


def apply_overrides(
    config: HistogramConfig,
    cache_path: Optional[os.PathLike] = None,
    images: Optional[Iterable[ImageSource]] = None,
    rescan_on_corrupt: Optional[bool] = None,
) -> HistogramConfig:
    """Return ``config`` with any non-None override applied; images replace, not extend."""
    changes = {}
    if cache_path is not None:
        changes['cache_path'] = Path(cache_path).expanduser()
    if images is not None:
        images = tuple(images)
        if images:
            _check_unique(images)
            changes['images'] = images
    if rescan_on_corrupt is not None:
        changes['rescan_on_corrupt'] = rescan_on_corrupt
    return replace(config, **changes) if changes else config
