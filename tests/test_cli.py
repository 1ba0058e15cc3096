"""
Tests for the CLI module.
"""

import unittest
from pathlib import Path
from unittest.mock import patch
import tempfile
import json
import io

from dom_xss_detector.cli import load_patterns, main


class TestCLI(unittest.TestCase):
    """Test cases for the command-line interface."""

    def setUp(self):
        """Set up test fixtures."""
        with tempfile.NamedTemporaryFile(mode='w', suffix='.js', delete=False) as f:
            f.write('var x = location.hash;\neval(x);\n')
            self.js_path = Path(f.name)

    def tearDown(self):
        """Clean up temporary files."""
        self.js_path.unlink()

    def test_version_argument(self):
        """Test that --version flag works."""
        with self.assertRaises(SystemExit) as cm:
            with patch('sys.stdout', new_callable=io.StringIO):
                main(['--version'])
        self.assertEqual(cm.exception.code, 0)

    def test_help_argument(self):
        """Test that --help flag works."""
        with self.assertRaises(SystemExit) as cm:
            with patch('sys.stdout', new_callable=io.StringIO):
                main(['--help'])
        self.assertEqual(cm.exception.code, 0)

    def test_no_command(self):
        """Test that running without a command prints help and fails."""
        with patch('sys.stdout', new_callable=io.StringIO):
            self.assertEqual(main([]), 1)

    def test_nonexistent_path(self):
        """Test error handling for non-existent paths."""
        with patch('sys.stderr', new_callable=io.StringIO) as mock_stderr:
            exit_code = main(['analyze', '/nonexistent/path/to/file.js'])
            self.assertEqual(exit_code, 1)
            self.assertIn("does not exist", mock_stderr.getvalue())

    def test_valid_file_path(self):
        """Test analysis of a valid file path."""
        with patch('sys.stdout', new_callable=io.StringIO) as mock_stdout:
            exit_code = main(['analyze', str(self.js_path), '--no-emulate'])
            self.assertEqual(exit_code, 0)
            output = mock_stdout.getvalue()
            self.assertIn('1 finding(s)', output)
            self.assertIn('location.hash -> eval', output)

    def test_output_file(self):
        """Test results are written as JSON with -o."""
        with tempfile.TemporaryDirectory() as temp_dir:
            output_path = Path(temp_dir) / 'results.json'
            with patch('sys.stdout', new_callable=io.StringIO):
                exit_code = main(['analyze', str(self.js_path), '--no-emulate', '-o', str(output_path)])
            self.assertEqual(exit_code, 0)
            results = json.loads(output_path.read_text())
            self.assertEqual(results['finding_count'], 1)

    def test_custom_pattern_files(self):
        """Test --sources and --sinks replace the defaults."""
        with tempfile.TemporaryDirectory() as temp_dir:
            sinks = Path(temp_dir) / 'sinks.txt'
            sinks.write_text('# sinks\n\ndocument\\.write\n')
            with patch('sys.stdout', new_callable=io.StringIO) as mock_stdout:
                exit_code = main(['analyze', str(self.js_path), '--no-emulate', '--sinks', str(sinks)])
            self.assertEqual(exit_code, 0)
            self.assertIn('No findings detected', mock_stdout.getvalue())

    def test_invalid_pattern_file(self):
        """Test a malformed regex is reported without a traceback."""
        with tempfile.TemporaryDirectory() as temp_dir:
            sources = Path(temp_dir) / 'sources.txt'
            sources.write_text('location\\.hash\n(broken\n')
            with patch('sys.stderr', new_callable=io.StringIO) as mock_stderr:
                exit_code = main(['analyze', str(self.js_path), '--no-emulate', '--sources', str(sources)])
            self.assertEqual(exit_code, 1)
            self.assertIn('(broken', mock_stderr.getvalue())

    def test_verbose_flag(self):
        """Test that verbose flag is properly passed."""
        with patch('sys.stdout', new_callable=io.StringIO):
            exit_code = main(['analyze', str(self.js_path), '--no-emulate', '--verbose'])
            self.assertEqual(exit_code, 0)

    def test_load_patterns(self):
        """Test comments and blank lines are dropped from pattern files."""
        self.assertIsNone(load_patterns(None))
        with tempfile.TemporaryDirectory() as temp_dir:
            path = Path(temp_dir) / 'p.txt'
            path.write_text('# comment\neval\\(\n\n  innerHTML  \n')
            self.assertEqual(load_patterns(str(path)), ['eval\\(', 'innerHTML'])


if __name__ == '__main__':
    unittest.main()
