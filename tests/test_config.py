"""
Tests for the configuration module.
"""

import os
import unittest
from unittest.mock import patch

from dom_xss_detector.config import Config


class TestConfig(unittest.TestCase):
    """Test cases for environment-driven settings."""

    def load(self, env):
        with patch.dict(os.environ, env, clear=True), patch("dom_xss_detector.config.load_dotenv"):
            return Config()

    def test_defaults(self):
        """Test defaults when no variables are set."""
        config = self.load({})
        self.assertEqual(config.emulator_timeout, 5.0)
        self.assertEqual(config.emulator_memory_mb, 64)
        self.assertEqual(config.emulator_memory_limit, 64 * 1024 * 1024)

    def test_environment_overrides(self):
        """Test variables override the defaults."""
        config = self.load({"DOMTAINT_EMULATOR_TIMEOUT": "1.5", "DOMTAINT_EMULATOR_MEMORY_MB": "16"})
        self.assertEqual(config.emulator_timeout, 1.5)
        self.assertEqual(config.emulator_memory_limit, 16 * 1024 * 1024)

    def test_validate_defaults(self):
        """Test the defaults pass validation without warnings."""
        result = self.load({}).validate()
        self.assertTrue(result["valid"])
        self.assertEqual(result["warnings"], [])

    def test_validate_long_timeout(self):
        """Test a very long budget is a warning, not an error."""
        result = self.load({"DOMTAINT_EMULATOR_TIMEOUT": "120"}).validate()
        self.assertTrue(result["valid"])
        self.assertEqual(len(result["warnings"]), 1)

    def test_validate_bad_limits(self):
        """Test non-positive limits fail validation."""
        result = self.load({"DOMTAINT_EMULATOR_TIMEOUT": "0", "DOMTAINT_EMULATOR_MEMORY_MB": "-1"}).validate()
        self.assertFalse(result["valid"])
        self.assertEqual(len(result["missing"]), 2)


if __name__ == '__main__':
    unittest.main()
