from __future__ import annotations

from decimal import Decimal
import unittest

import numpy as np

from lossplot.adapters.normalize import normalize_pairs, normalize_xy
from lossplot.errors import PlotDataError


class NormalizeXYTests(unittest.TestCase):
    def test_index_is_default_x(self) -> None:
        x, y = normalize_xy([0.9, 0.7, 0.4])
        self.assertEqual(x.tolist(), [0.0, 1.0, 2.0])
        self.assertEqual(y.tolist(), [0.9, 0.7, 0.4])

    def test_decimal_and_none_become_floats_and_nan(self) -> None:
        _, y = normalize_xy([Decimal("1.5"), Decimal("2.25"), None, Decimal("3.5")])
        self.assertEqual(y.dtype, np.float64)
        self.assertTrue(np.array_equal(np.isfinite(y), np.asarray([True, True, False, True])))
        self.assertEqual(y[1], 2.25)

    def test_empty_series_is_allowed(self) -> None:
        x, y = normalize_xy([])
        self.assertEqual(x.size, 0)
        self.assertEqual(y.size, 0)

    def test_input_array_is_copied(self) -> None:
        source = np.asarray([1.0, 2.0, 3.0])
        _, y = normalize_xy(source)
        source[0] = 99.0
        self.assertEqual(y[0], 1.0)

    def test_length_mismatch_is_rejected(self) -> None:
        with self.assertRaises(PlotDataError):
            normalize_xy([1.0, 2.0], x=[0.0])

    def test_non_1d_input_is_rejected(self) -> None:
        with self.assertRaises(PlotDataError):
            normalize_xy(np.zeros((2, 2)))
        with self.assertRaises(PlotDataError):
            normalize_xy([[1.0, 2.0], [3.0, 4.0]])

    def test_non_numeric_values_are_rejected(self) -> None:
        with self.assertRaises(PlotDataError):
            normalize_xy([1.0, "two", 3.0])
        with self.assertRaises(PlotDataError):
            normalize_xy("123")

    def test_missing_y_is_rejected(self) -> None:
        with self.assertRaises(PlotDataError):
            normalize_xy(None)

    def test_torch_tensor(self) -> None:
        try:
            import torch
        except Exception:
            self.skipTest("torch is not installed")

        losses = torch.tensor([3, 2, 1], dtype=torch.int64)
        _, y = normalize_xy(losses)
        self.assertEqual(y.dtype, np.float64)
        self.assertEqual(y.tolist(), [3.0, 2.0, 1.0])

    def test_torch_tensor_is_copied(self) -> None:
        try:
            import torch
        except Exception:
            self.skipTest("torch is not installed")

        losses = torch.tensor([0.9, 0.5, 0.3], dtype=torch.float64)
        _, y = normalize_xy(losses)
        losses[0] = 42.0
        losses.mul_(2.0)
        self.assertEqual(y.tolist(), [0.9, 0.5, 0.3])

    def test_pandas_column_and_dataframe(self) -> None:
        try:
            import pandas as pd
        except Exception:
            self.skipTest("pandas is not installed")

        df = pd.DataFrame({"epoch": [1, 2, 3], "loss": [0.5, 0.25, 0.125]})
        x, y = normalize_xy("loss", x="epoch", data=df)
        self.assertEqual(x.tolist(), [1.0, 2.0, 3.0])
        self.assertEqual(y.tolist(), [0.5, 0.25, 0.125])

        _, single = normalize_xy(pd.DataFrame({"value": [1, 2, 3]}))
        self.assertEqual(single.tolist(), [1.0, 2.0, 3.0])


class NormalizePairsTests(unittest.TestCase):
    def test_sequence_of_pairs(self) -> None:
        x, y = normalize_pairs([(0, 0.0), (1, 10.0), (3, Decimal("4.5"))])
        self.assertEqual(x.tolist(), [0.0, 1.0, 3.0])
        self.assertEqual(y.tolist(), [0.0, 10.0, 4.5])

    def test_n_by_2_array(self) -> None:
        x, y = normalize_pairs(np.asarray([[0.0, 1.0], [2.0, 3.0]]))
        self.assertEqual(x.tolist(), [0.0, 2.0])
        self.assertEqual(y.tolist(), [1.0, 3.0])

    def test_empty_pairs(self) -> None:
        x, y = normalize_pairs([])
        self.assertEqual((x.size, y.size), (0, 0))

    def test_malformed_pairs_are_rejected(self) -> None:
        with self.assertRaises(PlotDataError):
            normalize_pairs([(0.0, 1.0), (2.0,)])
        with self.assertRaises(PlotDataError):
            normalize_pairs(np.zeros((3, 3)))
        with self.assertRaises(PlotDataError):
            normalize_pairs(42)


if __name__ == "__main__":
    unittest.main()
