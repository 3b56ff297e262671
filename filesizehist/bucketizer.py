"""
Logarithmic (decade) bucketing of file sizes.

A size ``s`` lands in bucket ``floor(log10(max(1, s)))``. The decade is taken
from the digit count of the clamped integer, so exact powers of ten never slip
into the bucket below through floating point rounding.
"""
from __future__ import annotations

import logging
from collections import defaultdict
from typing import Dict, Iterable

from .models import BucketStat, Histogram

logger = logging.getLogger('filesizehist.bucketizer')

BUCKET_LABELS: Dict[int, str] = {
    0: "10 B", 1: "100 B",
    2: "1 KB", 3: "10 KB", 4: "100 KB",
    5: "1 MB", 6: "10 MB", 7: "100 MB",
    8: "1 GB", 9: "10 GB", 10: "100 GB",
}
UNKNOWN_LABEL = "???"


def bucket_index(size: int) -> int:
    """Return the decade index of ``size`` bytes; sizes below 1 map to bucket 0."""
    clamped = max(1, int(size))
    return len(str(clamped)) - 1


def bucket_label(index: int) -> str:
    """Axis label for a bucket: the exclusive upper bound of its decade."""
    return BUCKET_LABELS.get(index, UNKNOWN_LABEL)


class HistogramBuilder:
    """Mutable accumulator; ``build()`` freezes the result into a ``Histogram``."""

    def __init__(self):
        self._counts: Dict[int, int] = defaultdict(int)
        self._sizes: Dict[int, int] = defaultdict(int)

    def add(self, size: int) -> int:
        """
        Record one file of ``size`` bytes and return its bucket.

        The bucket uses the clamped size but the unclamped size is what gets
        added to the bucket total, so a 0-byte file adds 0 bytes to bucket 0.
        """
        if size < 0:
            raise ValueError(f"File size must be non-negative, got {size}")
        index = bucket_index(size)
        self._counts[index] += 1
        self._sizes[index] += int(size)
        return index

    def build(self) -> Histogram:
        return Histogram({
            k: BucketStat(count=self._counts[k], total_size_bytes=self._sizes[k])
            for k in self._counts
        })


def bucketize(sizes: Iterable[int]) -> Histogram:
    """Consume ``sizes`` (a single pass) and return the resulting histogram."""
    builder = HistogramBuilder()
    for size in sizes:
        builder.add(size)
    histogram = builder.build()
    logger.debug(f"Bucketized {histogram.total_file_count} files into {len(histogram)} buckets")
    return histogram
