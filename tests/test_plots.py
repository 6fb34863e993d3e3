"""
Unit tests for plot generation functionality.

Tests that plots are created correctly and files are generated from a
short headless run.
"""

import os
import shutil
import tempfile
import unittest

import numpy as np

from launch_sim.config import create_test_config
from launch_sim.main import SimulationLog, run_mission
from launch_sim.plotting import (
    TelemetrySeries,
    _find_staging_times,
    extract_log_data,
    generate_all_plots,
)


class TestPlotGeneration(unittest.TestCase):
    """Test suite for plot generation functionality."""

    @classmethod
    def setUpClass(cls):
        _, cls.log, _ = run_mission(duration=20.0, speed=5.0, config=create_test_config())

    def setUp(self):
        self.temp_dir = tempfile.mkdtemp()

    def tearDown(self):
        shutil.rmtree(self.temp_dir, ignore_errors=True)

    def test_generate_all_plots_creates_files(self):
        """All seven plots are written to the output directory."""
        output_dir = os.path.join(self.temp_dir, "plots")
        files = generate_all_plots(self.log, output_dir)

        self.assertEqual(len(files), 7)
        for path in files:
            self.assertTrue(os.path.exists(path), f"Plot file not found: {path}")
            self.assertTrue(path.endswith(".png"))
            self.assertGreater(os.path.getsize(path), 0)

    def test_empty_log_produces_no_plots(self):
        files = generate_all_plots(SimulationLog(), self.temp_dir)
        self.assertEqual(files, [])
        self.assertEqual(os.listdir(self.temp_dir), [])

    def test_extract_log_data(self):
        data = extract_log_data(self.log)
        self.assertIsInstance(data, TelemetrySeries)
        self.assertEqual(len(data.time), len(self.log))
        self.assertEqual(len(data.altitude), len(self.log))
        self.assertEqual(data.stage.dtype.kind, 'i')


class TestStagingDetection(unittest.TestCase):

    def test_staging_time_found(self):
        log = SimulationLog()
        log.time = [160.0, 165.0, 170.0, 175.0]
        log.stage = [1, 1, 2, 2]
        data = extract_log_data(log)
        self.assertEqual(_find_staging_times(data), [170.0])

    def test_no_staging(self):
        log = SimulationLog()
        log.time = list(np.linspace(0, 10, 5))
        log.stage = [1] * 5
        self.assertEqual(_find_staging_times(extract_log_data(log)), [])


if __name__ == '__main__':
    unittest.main()
