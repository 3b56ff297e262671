"""In-memory model: bucket statistics, histograms, datasets and collections."""
from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Dict, Iterable, Iterator, List, Mapping, Optional, Sequence, Tuple

import pandas as pd

from .transforms import cumulate, relativize

DIMENSIONS = ('count', 'size')


@dataclass(frozen=True)
class BucketStat:
    """Aggregate over every file that falls into one bucket."""

    count: int
    total_size_bytes: int

    def __post_init__(self):
        if self.count < 1:
            raise ValueError(f"BucketStat.count must be >= 1, got {self.count}")
        if self.total_size_bytes < 0:
            raise ValueError(f"BucketStat.total_size_bytes must be >= 0, got {self.total_size_bytes}")


class Histogram(Mapping[int, BucketStat]):
    """
    Read-only mapping of bucket index to ``BucketStat``.

    Only buckets that received at least one file are present. Iteration is
    in ascending bucket order.
    """

    __slots__ = ('_stats',)

    def __init__(self, stats: Optional[Mapping[int, BucketStat]] = None):
        ordered = {int(k): stats[k] for k in sorted(stats)} if stats else {}
        self._stats = MappingProxyType(ordered)

    def __getitem__(self, index: int) -> BucketStat:
        return self._stats[index]

    def __iter__(self) -> Iterator[int]:
        return iter(self._stats)

    def __len__(self) -> int:
        return len(self._stats)

    def __repr__(self) -> str:
        return f"Histogram({dict(self._stats)!r})"

    def __eq__(self, other):
        if isinstance(other, Histogram):
            return dict(self._stats) == dict(other._stats)
        return NotImplemented

    def __hash__(self):
        return hash(frozenset(self._stats.items()))

    @property
    def total_file_count(self) -> int:
        return sum(s.count for s in self._stats.values())

    @property
    def total_size_bytes(self) -> int:
        return sum(s.total_size_bytes for s in self._stats.values())

    def counts(self) -> Dict[int, int]:
        return {k: s.count for k, s in self._stats.items()}

    def sizes(self) -> Dict[int, int]:
        return {k: s.total_size_bytes for k, s in self._stats.items()}

    def project(self, dimension: str) -> Dict[int, int]:
        """Return the per-bucket values for ``dimension`` ('count' or 'size')."""
        if dimension == 'count':
            return self.counts()
        if dimension == 'size':
            return self.sizes()
        raise ValueError(f"Unknown dimension {dimension!r}; expected one of {DIMENSIONS}")

    def total(self, dimension: str) -> int:
        if dimension == 'count':
            return self.total_file_count
        if dimension == 'size':
            return self.total_size_bytes
        raise ValueError(f"Unknown dimension {dimension!r}; expected one of {DIMENSIONS}")


@dataclass(frozen=True)
class Dataset:
    """Statistics for one scanned root directory (an "image")."""

    name: str
    histogram: Histogram

    @property
    def total_file_count(self) -> int:
        return self.histogram.total_file_count

    @property
    def total_size_bytes(self) -> int:
        return self.histogram.total_size_bytes

    def to_frame(self):
        """
        Tabulate the histogram with its derived series as a pandas DataFrame.

        Relative columns are NaN when the dataset is empty in that dimension.
        """
        from .bucketizer import bucket_label  # bucketizer imports this module

        hist = self.histogram
        columns = ['bucket', 'label', 'count', 'total_size_bytes',
                   'cumulative_count', 'cumulative_size',
                   'relative_cumulative_count', 'relative_cumulative_size']
        if not hist:
            return pd.DataFrame(columns=columns)

        cum_count = cumulate(hist.counts())
        cum_size = cumulate(hist.sizes())
        rel_count = relativize(cum_count, hist.total_file_count)
        if hist.total_size_bytes > 0:
            rel_size = relativize(cum_size, hist.total_size_bytes)
        else:
            rel_size = {k: float('nan') for k in hist}

        rows = [
            {
                'bucket': k,
                'label': bucket_label(k),
                'count': stat.count,
                'total_size_bytes': stat.total_size_bytes,
                'cumulative_count': cum_count[k],
                'cumulative_size': cum_size[k],
                'relative_cumulative_count': rel_count[k],
                'relative_cumulative_size': rel_size[k],
            }
            for k, stat in hist.items()
        ]
        return pd.DataFrame(rows, columns=columns)


class DatasetCollection(Sequence[Dataset]):
    """Ordered, immutable sequence of datasets; the unit of caching."""

    __slots__ = ('_datasets',)

    def __init__(self, datasets: Iterable[Dataset] = ()):
        items: Tuple[Dataset, ...] = tuple(datasets)
        seen = set()
        for ds in items:
            if ds.name in seen:
                raise ValueError(f"Duplicate dataset name: {ds.name!r}")
            seen.add(ds.name)
        self._datasets = items

    def __getitem__(self, index):
        return self._datasets[index]

    def __len__(self) -> int:
        return len(self._datasets)

    def __eq__(self, other):
        if isinstance(other, DatasetCollection):
            return self._datasets == other._datasets
        return NotImplemented

    __hash__ = None

    def __repr__(self) -> str:
        return f"DatasetCollection({list(self._datasets)!r})"

    @property
    def names(self) -> List[str]:
        return [ds.name for ds in self._datasets]

    def get(self, name: str) -> Dataset:
        for ds in self._datasets:
            if ds.name == name:
                return ds
        raise KeyError(name)

    def to_frame(self):
        """Concatenate every dataset's table with a leading ``name`` column."""
        frames = []
        for ds in self._datasets:
            df = ds.to_frame()
            df.insert(0, 'name', ds.name)
            frames.append(df)
        if not frames:
            return pd.DataFrame(columns=['name'])
        return pd.concat(frames, ignore_index=True)
