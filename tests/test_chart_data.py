"""
Unit tests for ops/assembler.py

Tests dataset assembly, graceful handling of absent or malformed results,
and the end-to-end display bounds.
"""

import copy
import unittest
import sys
import os

import pandas as pd

# Add parent and tests dir to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from core.models import AnalysisResult, ChartDataset
from ops.assembler import assemble_chart_data
from sample_results import make_result_payload


class TestAssembleChartData(unittest.TestCase):
    """Test suite for assemble_chart_data()."""

    def setUp(self):
        self.payload = make_result_payload()

    def test_none_gives_no_dataset(self):
        self.assertIsNone(assemble_chart_data(None))

    def test_end_to_end_bounds(self):
        """5000 samples, 15 harmonics, spectrum up to 500 Hz."""
        dataset = assemble_chart_data(AnalysisResult(self.payload), n_harmonics=15)

        self.assertIsInstance(dataset, ChartDataset)
        self.assertEqual(dataset.stride, 10)
        self.assertEqual(len(dataset.signal), 500)
        self.assertEqual(len(dataset.error), 500)
        self.assertEqual(len(dataset.coefficients), 15)
        self.assertEqual(dataset.coefficients["n"].tolist(), list(range(1, 16)))
        self.assertLessEqual(len(dataset.spectrum), 100)
        self.assertTrue((dataset.spectrum["frequency"] > 0).all())
        self.assertTrue((dataset.spectrum["frequency"] <= 50).all())

    def test_signal_columns_share_source_index(self):
        dataset = assemble_chart_data(self.payload)
        source = self.payload["original_signal"]
        for i in (0, 1, 250, 499):
            row = dataset.signal.iloc[i]
            self.assertAlmostEqual(row["time"], round(source["time"][i * 10], 3))
            self.assertEqual(row["original"], source["values"][i * 10])
            self.assertEqual(row["fourier"],
                             self.payload["fourier_approximation"]["values"][i * 10])
            self.assertEqual(dataset.error.iloc[i]["error"],
                             self.payload["error_signal"]["values"][i * 10])

    def test_time_rounded_for_display(self):
        payload = make_result_payload(n_samples=300, duration=1.0)
        dataset = assemble_chart_data(payload)
        # 1/300 s spacing -> 0.00333... rounded to 0.003
        self.assertEqual(dataset.signal["time"].iloc[1], 0.003)
        self.assertNotEqual(payload["original_signal"]["time"][1], 0.003)

    def test_harmonics_default_to_coefficient_count(self):
        dataset = assemble_chart_data(make_result_payload(n_harmonics=8))
        self.assertEqual(len(dataset.coefficients), 8)

    def test_coefficients_capped_at_twenty(self):
        dataset = assemble_chart_data(make_result_payload(n_harmonics=40), n_harmonics=40)
        self.assertEqual(len(dataset.coefficients), 20)

    def test_statistics_carried(self):
        dataset = assemble_chart_data(self.payload)
        self.assertAlmostEqual(dataset.statistics.mse, 0.01)
        self.assertAlmostEqual(dataset.statistics.max_error, 0.1)

    def test_missing_statistics_still_renders(self):
        del self.payload["statistics"]
        dataset = assemble_chart_data(self.payload)
        self.assertIsNotNone(dataset)
        self.assertIsNone(dataset.statistics)

    def test_deterministic(self):
        first = assemble_chart_data(self.payload, n_harmonics=15)
        second = assemble_chart_data(self.payload, n_harmonics=15)
        pd.testing.assert_frame_equal(first.signal, second.signal)
        pd.testing.assert_frame_equal(first.error, second.error)
        pd.testing.assert_frame_equal(first.coefficients, second.coefficients)
        pd.testing.assert_frame_equal(first.spectrum, second.spectrum)

    def test_payload_not_modified(self):
        before = copy.deepcopy(self.payload)
        assemble_chart_data(self.payload)
        self.assertEqual(self.payload, before)

    def test_incomplete_results_give_no_dataset(self):
        cases = []

        missing_section = make_result_payload(n_samples=50)
        del missing_section["frequency_spectrum"]
        cases.append(missing_section)

        missing_array = make_result_payload(n_samples=50)
        del missing_array["coefficients"]["bn"]
        cases.append(missing_array)

        misaligned = make_result_payload(n_samples=50)
        misaligned["fourier_approximation"]["values"] = [0.0] * 49
        cases.append(misaligned)

        not_numeric = make_result_payload(n_samples=50)
        not_numeric["original_signal"]["values"] = ["a"] * 50
        cases.append(not_numeric)

        section_not_object = make_result_payload(n_samples=50)
        section_not_object["error_signal"] = [1, 2, 3]
        cases.append(section_not_object)

        cases.append({})

        for payload in cases:
            with self.assertLogs("FourierViewer", level="WARNING"):
                self.assertIsNone(assemble_chart_data(payload))

    def test_non_mapping_result(self):
        with self.assertLogs("FourierViewer", level="WARNING"):
            self.assertIsNone(assemble_chart_data("not a result"))

    def test_small_result_passes_through(self):
        dataset = assemble_chart_data(make_result_payload(n_samples=120))
        self.assertEqual(dataset.stride, 1)
        self.assertEqual(len(dataset.signal), 120)


if __name__ == "__main__":
    unittest.main()
