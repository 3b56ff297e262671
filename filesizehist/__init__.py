"""
filesizehist
============

Logarithmic file size histograms for directory trees.

This package provides tools for:
- Walking directory trees and collecting regular file sizes
- Bucketing sizes by decade with per-bucket file counts and byte totals
- Cumulative and relative cumulative series for counts and sizes
- Caching computed histograms as pretty-printed JSON
- A registry that loads the cache or scans and writes it on first use
"""

__version__ = '0.1.0'

from .bucketizer import bucket_index, bucket_label, bucketize
from .config import HistogramConfig, ImageSource, load_config
from .errors import (
    CacheCorruptError,
    ConfigError,
    FileSizeHistError,
    RegistryNotInitializedError,
    RelativizeError,
    ScanError,
)
from .models import BucketStat, Dataset, DatasetCollection, Histogram
from .registry import DatasetRegistry, build_collection
from .scanner import scan_file_sizes
from .transforms import cumulate, cumulative_series, relative_cumulative_series, relativize

# Main exports
__all__ = [
    'BucketStat',
    'CacheCorruptError',
    'ConfigError',
    'Dataset',
    'DatasetCollection',
    'DatasetRegistry',
    'FileSizeHistError',
    'Histogram',
    'HistogramConfig',
    'ImageSource',
    'RegistryNotInitializedError',
    'RelativizeError',
    'ScanError',
    'bucket_index',
    'bucket_label',
    'bucketize',
    'build_collection',
    'cumulate',
    'cumulative_series',
    'load_config',
    'relative_cumulative_series',
    'relativize',
    'scan_file_sizes',
]
