"""
Series for the chart views built on top of a dataset collection.

Each view names the data a renderer plots; nothing here draws anything.
Points are ordered by bucket index and carry the bucket's axis label.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Dict, List, Mapping

import pandas as pd

from .bucketizer import bucket_label
from .models import DIMENSIONS, DatasetCollection, Histogram
from .transforms import cumulative_series, relative_cumulative_series

X_AXIS_LABEL = "File size (in bytes)"
Y_AXIS_LABELS = {
    'count': "Number of files",
    'size': "Total size (in bytes)",
}
RELATIVE_Y_AXIS_LABELS = {
    'count': "Number of files / total in %",
    'size': "Total size / overall size in %",
}


@dataclass(frozen=True)
class ChartView:
    key: str
    tab_title: str
    title: str
    transform: Callable[[Histogram, str], Mapping[int, float]]
    relative: bool = False
    first_dataset_only: bool = False

    def y_label(self, dimension: str) -> str:
        labels = RELATIVE_Y_AXIS_LABELS if self.relative else Y_AXIS_LABELS
        return labels[dimension]


def _raw(histogram: Histogram, dimension: str) -> Mapping[int, int]:
    return histogram.project(dimension)


VIEWS: Dict[str, ChartView] = {
    'line': ChartView('line', "Line Chart", "Frequency by file size", _raw),
    'cumulative': ChartView('cumulative', "Cumulative Line Chart",
                            "Cumulative frequency by file size", cumulative_series),
    'relative_cumulative': ChartView('relative_cumulative', "Relative Cumulative Line Chart",
                                     "Relative cumulative frequency by file size",
                                     relative_cumulative_series, relative=True),
    'bar': ChartView('bar', "Bar Chart", "Frequency by file size", _raw),
    'pie': ChartView('pie', "Pie Chart", "Frequency by file size of image {name}", _raw,
                     first_dataset_only=True),
}


def get_view(key: str) -> ChartView:
    try:
        return VIEWS[key]
    except KeyError:
        raise ValueError(f"Unknown view {key!r}; expected one of {sorted(VIEWS)}") from None


def view_series(collection: DatasetCollection, view: str, dimension: str = 'count') -> Dict[str, List[Dict]]:
    """
    Compute the points of ``view`` for every dataset it covers.

    Returns:
        ``{dataset name: [{"bucket", "label", "value"}, ...]}`` in collection order.

    Raises:
        ValueError: For an unknown view or dimension.
        RelativizeError: For a relative view over a dataset whose total is zero.
    """
    chart = get_view(view)
    if dimension not in DIMENSIONS:
        raise ValueError(f"Unknown dimension {dimension!r}; expected one of {DIMENSIONS}")

    datasets = list(collection)[:1] if chart.first_dataset_only else list(collection)
    result: Dict[str, List[Dict]] = {}
    for ds in datasets:
        values = chart.transform(ds.histogram, dimension)
        result[ds.name] = [
            {"bucket": k, "label": bucket_label(k), "value": values[k]}
            for k in sorted(values)
        ]
    return result


def view_title(collection: DatasetCollection, view: str) -> str:
    chart = get_view(view)
    if chart.first_dataset_only:
        first = collection[0].name if len(collection) else None
        return chart.title.format(name=first)
    return chart.title


def view_frame(collection: DatasetCollection, view: str, dimension: str = 'count') -> pd.DataFrame:
    """Long-format table of ``view_series``: one row per (dataset, bucket)."""
    rows = [
        {"name": name, **point}
        for name, points in view_series(collection, view, dimension).items()
        for point in points
    ]
    return pd.DataFrame(rows, columns=["name", "bucket", "label", "value"])
