import json
import unittest

from filesizehist.bucketizer import bucketize
from filesizehist.metrics import summarize_collection, summarize_dataset
from filesizehist.models import BucketStat, Dataset, DatasetCollection, Histogram


class TestSummarizeDataset(unittest.TestCase):
    """Summaries consumed by `filesizehist show --json`."""

    def setUp(self):
        self.dataset = Dataset("img", bucketize([1, 2, 3, 50, 9000, 9000]))

    def test_totals_and_mean(self):
        summary = summarize_dataset(self.dataset)
        self.assertEqual(summary["name"], "img")
        self.assertEqual(summary["total_file_count"], 6)
        self.assertEqual(summary["total_size_bytes"], 18056)
        self.assertAlmostEqual(summary["mean_file_size"], 18056 / 6)

    def test_bucket_range_and_modes(self):
        summary = summarize_dataset(self.dataset)
        self.assertEqual(summary["bucket_range"], [0, 3])
        self.assertEqual(summary["modal_bucket"], 0)
        self.assertEqual(summary["size_modal_bucket"], 3)

    def test_bucket_rows(self):
        rows = summarize_dataset(self.dataset)["buckets"]
        self.assertEqual([r["bucket"] for r in rows], [0, 1, 3])
        self.assertEqual(rows[0]["label"], "10 B")
        self.assertEqual(rows[0]["count"], 3)
        self.assertAlmostEqual(rows[0]["count_percent"], 50.0)
        self.assertAlmostEqual(sum(r["size_percent"] for r in rows), 100.0)

    def test_ties_go_to_lowest_bucket(self):
        ds = Dataset("tie", Histogram({
            2: BucketStat(count=4, total_size_bytes=400),
            5: BucketStat(count=4, total_size_bytes=400_000),
        }))
        self.assertEqual(summarize_dataset(ds)["modal_bucket"], 2)

    def test_empty_dataset(self):
        summary = summarize_dataset(Dataset("empty", Histogram()))
        self.assertIsNone(summary["mean_file_size"])
        self.assertIsNone(summary["bucket_range"])
        self.assertIsNone(summary["modal_bucket"])
        self.assertEqual(summary["buckets"], [])

    def test_zero_byte_only_dataset_has_no_size_share(self):
        rows = summarize_dataset(Dataset("zeros", bucketize([0])))["buckets"]
        self.assertIsNone(rows[0]["size_percent"])
        self.assertEqual(rows[0]["count_percent"], 100.0)


def test_summarize_collection_is_json_serializable():
    collection = DatasetCollection([
        Dataset("a", bucketize([5, 50])),
        Dataset("b", Histogram()),
    ])
    summaries = summarize_collection(collection)
    assert [s["name"] for s in summaries] == ["a", "b"]
    assert json.loads(json.dumps(summaries)) == summaries
