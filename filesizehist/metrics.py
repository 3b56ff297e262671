from typing import Any, Dict, List, Optional

import numpy as np

from .bucketizer import bucket_label
from .models import Dataset, DatasetCollection, Histogram
from .transforms import relativize


def _argmax_bucket(series: Dict[int, int]) -> Optional[int]:
    """Bucket holding the largest value; ties go to the lowest index."""
    if not series:
        return None
    keys = sorted(series)
    values = np.asarray([series[k] for k in keys], dtype=np.float64)
    return int(keys[int(np.argmax(values))])


def _shares(series: Dict[int, int], total: int) -> Dict[int, Optional[float]]:
    if total <= 0:
        return {k: None for k in series}
    return relativize(series, total)


def bucket_rows(histogram: Histogram) -> List[Dict[str, Any]]:
    """Per-bucket rows with each bucket's share of the file count and of the bytes."""
    counts = histogram.counts()
    sizes = histogram.sizes()
    count_share = _shares(counts, histogram.total_file_count)
    size_share = _shares(sizes, histogram.total_size_bytes)
    return [
        {
            "bucket": int(k),
            "label": bucket_label(k),
            "count": int(counts[k]),
            "total_size_bytes": int(sizes[k]),
            "count_percent": count_share[k],
            "size_percent": size_share[k],
        }
        for k in histogram
    ]


def summarize_dataset(dataset: Dataset) -> Dict[str, Any]:
    """JSON-serializable summary of one dataset.

    Contains: name, totals, mean_file_size, bucket_range, modal_bucket (most
    files), size_modal_bucket (most bytes) and per-bucket rows.
    """
    hist = dataset.histogram
    total_files = hist.total_file_count
    total_bytes = hist.total_size_bytes
    keys = list(hist)

    return {
        "name": dataset.name,
        "total_file_count": int(total_files),
        "total_size_bytes": int(total_bytes),
        "mean_file_size": (float(total_bytes) / float(total_files) if total_files > 0 else None),
        "bucket_range": ([int(keys[0]), int(keys[-1])] if keys else None),
        "modal_bucket": _argmax_bucket(hist.counts()),
        "size_modal_bucket": _argmax_bucket(hist.sizes()),
        "buckets": bucket_rows(hist),
    }


def summarize_collection(collection: DatasetCollection) -> List[Dict[str, Any]]:
    return [summarize_dataset(ds) for ds in collection]
