import math

import pandas as pd
import pytest

from filesizehist.bucketizer import bucketize
from filesizehist.errors import RelativizeError
from filesizehist.models import Dataset, DatasetCollection, Histogram
from filesizehist.series import VIEWS, view_frame, view_series, view_title


@pytest.fixture
def collection():
    return DatasetCollection([
        Dataset("first", bucketize([1, 2, 30, 4000])),
        Dataset("second", bucketize([0, 100, 200])),
    ])


def values(points):
    return [p["value"] for p in points]


def test_all_chart_views_are_defined():
    assert set(VIEWS) == {"line", "cumulative", "relative_cumulative", "bar", "pie"}


def test_line_and_bar_plot_raw_counts(collection):
    for view in ("line", "bar"):
        series = view_series(collection, view)
        assert list(series) == ["first", "second"]
        assert series["first"] == [
            {"bucket": 0, "label": "10 B", "value": 2},
            {"bucket": 1, "label": "100 B", "value": 1},
            {"bucket": 3, "label": "10 KB", "value": 1},
        ]


def test_cumulative_view(collection):
    series = view_series(collection, "cumulative")
    assert values(series["first"]) == [2, 3, 4]
    assert values(series["second"]) == [1, 3]


def test_relative_cumulative_view(collection):
    series = view_series(collection, "relative_cumulative")
    assert values(series["first"]) == pytest.approx([50.0, 75.0, 100.0])
    assert values(series["second"]) == pytest.approx([100 / 3, 100.0])


def test_size_dimension(collection):
    series = view_series(collection, "cumulative", dimension="size")
    assert values(series["first"]) == [3, 33, 4033]
    assert values(series["second"]) == [0, 300]


def test_pie_covers_only_the_first_dataset(collection):
    series = view_series(collection, "pie")
    assert list(series) == ["first"]
    assert view_title(collection, "pie") == "Frequency by file size of image first"
    assert view_series(DatasetCollection(), "pie") == {}


def test_unknown_view_or_dimension(collection):
    with pytest.raises(ValueError):
        view_series(collection, "scatter")
    with pytest.raises(ValueError):
        view_series(collection, "line", dimension="bytes")


def test_relative_view_of_empty_dataset_is_reported():
    collection = DatasetCollection([Dataset("empty", Histogram())])
    with pytest.raises(RelativizeError):
        view_series(collection, "relative_cumulative")


def test_view_frame_long_format(collection):
    df = view_frame(collection, "line")
    assert list(df.columns) == ["name", "bucket", "label", "value"]
    assert len(df) == 5
    assert df[df["name"] == "second"]["value"].tolist() == [1, 2]


def test_dataset_to_frame(collection):
    df = collection.get("first").to_frame()
    assert df["bucket"].tolist() == [0, 1, 3]
    assert df["cumulative_count"].tolist() == [2, 3, 4]
    assert df["cumulative_size"].tolist() == [3, 33, 4033]
    assert df["relative_cumulative_count"].iloc[-1] == pytest.approx(100.0)
    assert df["relative_cumulative_size"].iloc[0] == pytest.approx(3 / 4033 * 100)


def test_to_frame_empty_and_zero_size():
    assert Dataset("e", Histogram()).to_frame().empty

    df = Dataset("zeros", bucketize([0, 0])).to_frame()
    assert df["relative_cumulative_count"].tolist() == [100.0]
    assert math.isnan(df["relative_cumulative_size"].iloc[0])


def test_collection_to_frame(collection):
    df = collection.to_frame()
    assert isinstance(df, pd.DataFrame)
    assert df.columns[0] == "name"
    assert df["name"].tolist() == ["first"] * 3 + ["second"] * 2
