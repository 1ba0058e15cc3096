"""
Tests for the detector module.
"""

import unittest
from pathlib import Path
import tempfile
import json
import os

from dom_xss_detector.detector import DomXssDetector
from dom_xss_detector.exceptions import PatternError

VULNERABLE_JS = 'var x = location.hash;\ndocument.write(x);\n'


class TestDomXssDetector(unittest.TestCase):
    """Test cases for the main detector."""

    def setUp(self):
        """Set up test fixtures."""
        self.detector = DomXssDetector(emulate=False)

    def test_detector_initialization(self):
        """Test detector can be initialized."""
        detector = DomXssDetector(verbose=True, emulate=False)
        self.assertTrue(detector.verbose)
        self.assertIsNotNone(detector.parser)
        self.assertIsNotNone(detector.analyzer)

    def test_invalid_patterns_rejected(self):
        """Test bad patterns fail at construction time."""
        with self.assertRaises(PatternError):
            DomXssDetector(emulate=False, sink_patterns=['[unterminated'])

    def test_analyze_single_file(self):
        """Test analyzing a single JavaScript file."""
        with tempfile.NamedTemporaryFile(mode='w', suffix='.js', delete=False) as f:
            f.write(VULNERABLE_JS)
            temp_path = Path(f.name)

        try:
            result = self.detector.analyze(temp_path)

            self.assertEqual(result['file'], str(temp_path))
            self.assertEqual(result['finding_count'], 1)
            finding = result['findings'][0]
            self.assertEqual(finding['source'], 'location.hash')
            self.assertEqual(finding['sink'], 'document.write')
            self.assertEqual(finding['evidence'], 'document.write(x)')
            self.assertNotIn('error', result)
        finally:
            temp_path.unlink()

    def test_analyze_html_file(self):
        """Test scripts and handlers in HTML are analyzed."""
        html = """
        <html><body>
        <script>var x = location.hash; eval(x);</script>
        <a href="#" onclick="document.write(location.search)">go</a>
        </body></html>
        """
        with tempfile.NamedTemporaryFile(mode='w', suffix='.html', delete=False) as f:
            f.write(html)
            temp_path = Path(f.name)

        try:
            result = self.detector.analyze(temp_path)
            sinks = [finding['sink'] for finding in result['findings']]
            self.assertEqual(sinks, ['eval', 'document.write'])
        finally:
            temp_path.unlink()

    def test_parse_error_reported(self):
        """Test a syntax error is reported on the file entry."""
        with tempfile.NamedTemporaryFile(mode='w', suffix='.js', delete=False) as f:
            f.write('var = ;')
            temp_path = Path(f.name)

        try:
            result = self.detector.analyze(temp_path)
            self.assertIn('error', result)
            self.assertEqual(result['finding_count'], 0)
        finally:
            temp_path.unlink()

    def test_implicit_globals_reported(self):
        """Test implicit globals are listed per file."""
        with tempfile.NamedTemporaryFile(mode='w', suffix='.js', delete=False) as f:
            f.write('b = 1; a = 2;')
            temp_path = Path(f.name)

        try:
            result = self.detector.analyze(temp_path)
            self.assertEqual(result['global_accesses'], ['a', 'b'])
        finally:
            temp_path.unlink()

    def test_analyze_directory(self):
        """Test analyzing a directory of JavaScript and HTML files."""
        with tempfile.TemporaryDirectory() as temp_dir:
            temp_path = Path(temp_dir)

            (temp_path / 'a.js').write_text(VULNERABLE_JS)
            (temp_path / 'nested').mkdir()
            (temp_path / 'nested' / 'b.html').write_text('<script>eval(location.hash)</script>')
            (temp_path / 'notes.txt').write_text('eval(location.hash)')

            result = self.detector.analyze(temp_path)

            self.assertEqual(result['directory'], str(temp_path))
            self.assertEqual(len(result['files']), 2)
            self.assertEqual(result['total_findings'], 2)

    def test_analyze_non_js_file_skipped(self):
        """Test that unsupported files are skipped."""
        with tempfile.NamedTemporaryFile(mode='w', suffix='.txt', delete=False) as f:
            f.write('Not JavaScript')
            temp_path = Path(f.name)

        try:
            result = self.detector.analyze(temp_path)
            self.assertTrue(result.get('skipped', False))
        finally:
            temp_path.unlink()

    def test_analyze_invalid_path(self):
        """Test that a missing path raises ValueError."""
        with self.assertRaises(ValueError):
            self.detector.analyze(Path('/nonexistent/path'))

    def test_save_results(self):
        """Test saving results to JSON file."""
        results = {'file': 'test.js', 'findings': [], 'finding_count': 0}

        with tempfile.NamedTemporaryFile(mode='w', suffix='.json', delete=False) as f:
            output_path = Path(f.name)

        try:
            self.detector.save_results(results, output_path)

            with open(output_path, 'r') as f:
                loaded = json.load(f)

            self.assertEqual(loaded, results)
        finally:
            if os.path.exists(output_path):
                os.unlink(output_path)


if __name__ == '__main__':
    unittest.main()
