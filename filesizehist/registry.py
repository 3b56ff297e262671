"""
Dataset registry: builds the dataset collection once and hands it to consumers.

The application creates one ``DatasetRegistry`` and passes it around; there
is no module-level instance.
"""
from __future__ import annotations

import logging
import threading
import time
from typing import Callable, Iterable, Iterator, Optional

from . import cache
from .bucketizer import bucketize
from .config import HistogramConfig, ImageSource
from .errors import CacheCorruptError, ConfigError, RegistryNotInitializedError
from .models import Dataset, DatasetCollection
from .scanner import scan_file_sizes

logger = logging.getLogger('filesizehist.registry')

Scanner = Callable[..., Iterator[int]]


def build_collection(images: Iterable[ImageSource], scanner: Scanner = scan_file_sizes) -> DatasetCollection:
    """
    Scan and bucketize every image, in order.

    A ``ScanError`` for any root propagates and nothing is returned, so a
    partially scanned collection never reaches the cache.
    """
    datasets = []
    for image in images:
        start = time.time()
        logger.info(f"Scanning image '{image.name}' at {image.root}")
        histogram = bucketize(scanner(image.root))
        logger.info(
            f"Image '{image.name}': {histogram.total_file_count} files, "
            f"{histogram.total_size_bytes} bytes in {time.time() - start:.2f}s"
        )
        datasets.append(Dataset(name=image.name, histogram=histogram))
    return DatasetCollection(datasets)


class DatasetRegistry:
    """
    Loads the collection from cache or builds and caches it, exactly once.

    Args:
        config: Cache location, images to scan and corruption policy.
        scanner: Callable returning file sizes for a root; replaceable for tests.
    """

    def __init__(self, config: HistogramConfig, scanner: Scanner = scan_file_sizes):
        self.config = config
        self._scanner = scanner
        self._collection: Optional[DatasetCollection] = None
        self._lock = threading.Lock()

    @property
    def is_initialized(self) -> bool:
        return self._collection is not None

    def initialize(self, refresh: bool = False) -> DatasetCollection:
        """
        Populate the registry and return the collection.

        Later calls return the same collection. With ``refresh=True`` on the
        first call the cache is ignored and rebuilt from a fresh scan.

        Raises:
            ScanError: A configured root cannot be scanned.
            CacheCorruptError: The cache is corrupt and ``rescan_on_corrupt`` is off.
            ConfigError: A scan is needed but no images are configured.
        """
        with self._lock:
            if self._collection is None:
                self._collection = self._load_or_build(refresh)
            return self._collection

    def get(self) -> DatasetCollection:
        if self._collection is None:
            raise RegistryNotInitializedError("DatasetRegistry.get() called before initialize()")
        return self._collection

    def _load_or_build(self, refresh: bool) -> DatasetCollection:
        path = self.config.cache_path
        if not refresh and cache.exists(path):
            try:
                return cache.load(path)
            except CacheCorruptError as e:
                if not self.config.rescan_on_corrupt:
                    logger.error(f"{e}; refusing to rescan (enable rescan_on_corrupt to rebuild)")
                    raise
                logger.warning(f"{e}; rescanning and overwriting the cache")

        if not self.config.images:
            raise ConfigError(f"No images configured to scan and no usable cache at {path}")
        collection = build_collection(self.config.images, self._scanner)
        cache.save(path, collection)
        return collection
