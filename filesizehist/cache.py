"""
Cache store for dataset collections.

The artifact is a pretty-printed UTF-8 JSON array::

    [
      {
        "name": "Test Image",
        "histogram": {
          "0": {"count": 12, "totalSizeBytes": 57},
          "3": {"count": 4, "totalSizeBytes": 18211}
        }
      }
    ]

Bucket indices are stored as string keys. Counts and sizes are JSON integers,
which Python reads back exactly.
"""
from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, List, Union

from .errors import CacheCorruptError
from .json_handler import load_json_file, save_json_file
from .models import BucketStat, Dataset, DatasetCollection, Histogram

logger = logging.getLogger('filesizehist.cache')

PathLike = Union[str, Path]


def exists(path: PathLike) -> bool:
    """True if a cache artifact is present at ``path``."""
    return os.path.isfile(path)


def collection_to_json(collection: DatasetCollection) -> List[Dict[str, Any]]:
    return [
        {
            'name': ds.name,
            'histogram': {
                str(k): {'count': stat.count, 'totalSizeBytes': stat.total_size_bytes}
                for k, stat in ds.histogram.items()
            },
        }
        for ds in collection
    ]


def _require_int(value: Any, what: str, path: PathLike) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise CacheCorruptError(path, f"{what} must be an integer, got {value!r}")
    return value


def _parse_bucket_key(key: str, where: str, path: PathLike) -> int:
    if not (key.isascii() and key.isdigit()) or str(int(key)) != key:
        raise CacheCorruptError(path, f"{where}: invalid bucket index {key!r}")
    return int(key)


def _parse_histogram(raw: Any, where: str, path: PathLike) -> Histogram:
    if not isinstance(raw, dict):
        raise CacheCorruptError(path, f"{where}: 'histogram' must be an object")
    stats: Dict[int, BucketStat] = {}
    for key, entry in raw.items():
        index = _parse_bucket_key(key, where, path)
        if not isinstance(entry, dict):
            raise CacheCorruptError(path, f"{where} bucket {key}: expected an object")
        for field in ('count', 'totalSizeBytes'):
            if field not in entry:
                raise CacheCorruptError(path, f"{where} bucket {key}: missing '{field}'")
        count = _require_int(entry['count'], f"{where} bucket {key} count", path)
        size = _require_int(entry['totalSizeBytes'], f"{where} bucket {key} totalSizeBytes", path)
        if count < 1:
            raise CacheCorruptError(path, f"{where} bucket {key}: count must be >= 1, got {count}")
        if size < 0:
            raise CacheCorruptError(path, f"{where} bucket {key}: totalSizeBytes must be >= 0, got {size}")
        stats[index] = BucketStat(count=count, total_size_bytes=size)
    return Histogram(stats)


def collection_from_json(data: Any, path: PathLike = '<memory>') -> DatasetCollection:
    """Validate decoded JSON against the cache schema and build the model."""
    if not isinstance(data, list):
        raise CacheCorruptError(path, f"top level must be an array, got {type(data).__name__}")

    datasets = []
    names = set()
    for i, item in enumerate(data):
        where = f"dataset #{i}"
        if not isinstance(item, dict):
            raise CacheCorruptError(path, f"{where}: expected an object")
        if 'name' not in item or 'histogram' not in item:
            raise CacheCorruptError(path, f"{where}: requires 'name' and 'histogram'")
        name = item['name']
        if not isinstance(name, str):
            raise CacheCorruptError(path, f"{where}: 'name' must be a string")
        if name in names:
            raise CacheCorruptError(path, f"{where}: duplicate name {name!r}")
        names.add(name)
        datasets.append(Dataset(name=name, histogram=_parse_histogram(item['histogram'], f"{where} ({name})", path)))
    return DatasetCollection(datasets)


def load(path: PathLike) -> DatasetCollection:
    """
    Read the cache artifact at ``path``.

    Raises:
        FileNotFoundError: If there is no artifact.
        CacheCorruptError: If the file is not valid JSON or does not match the schema.
    """
    try:
        data = load_json_file(path)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise CacheCorruptError(path, str(e)) from e
    collection = collection_from_json(data, path)
    logger.info(f"Loaded {len(collection)} datasets from cache {path}")
    return collection


def save(path: PathLike, collection: DatasetCollection) -> Dict[str, Any]:
    """Write the whole collection to ``path``, replacing any existing artifact."""
    return save_json_file(
        collection_to_json(collection),
        path,
        prettify=True,
        metadata={'dataset_count': len(collection)},
    )
