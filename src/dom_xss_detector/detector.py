"""
Main detector module that coordinates file discovery and analysis.

This module provides the high-level API for scanning JavaScript and HTML
files on disk for DOM XSS flows.
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional, Sequence

from .analysis import DomXssAnalyzer
from .exceptions import ParseError
from .parser import HTML_SUFFIXES, SCRIPT_SUFFIXES, JavaScriptParser

logger = logging.getLogger(__name__)

SUPPORTED_SUFFIXES = SCRIPT_SUFFIXES | HTML_SUFFIXES


class DomXssDetector:
    """
    Main detector class for DOM XSS findings.

    Each file is split into JavaScript code blocks (one per file for
    scripts; inline scripts and event handlers for HTML) and every block
    goes through the analyzer on its own.
    """

    def __init__(self, verbose: bool = False, emulate: bool = True,
                 source_patterns: Optional[Sequence[str]] = None,
                 sink_patterns: Optional[Sequence[str]] = None):
        """
        Initialize the detector.

        Args:
            verbose: Enable verbose logging
            emulate: Run the dynamic emulation pass
            source_patterns: Source regexes (None for the defaults)
            sink_patterns: Sink regexes (None for the defaults)

        Raises:
            PatternError: If a pattern is invalid
        """
        self.verbose = verbose
        self.parser = JavaScriptParser(verbose=verbose)
        self.analyzer = DomXssAnalyzer(
            source_patterns, sink_patterns, emulate=emulate, verbose=verbose
        )

    def analyze(self, path: Path) -> Dict[str, Any]:
        """
        Analyze a JavaScript/HTML file or directory.

        Args:
            path: Path to a file or directory

        Returns:
            Dictionary containing analysis results

        Raises:
            ValueError: If the path is invalid
        """
        if path.is_file():
            return self._analyze_file(path)
        elif path.is_dir():
            return self._analyze_directory(path)
        else:
            raise ValueError(f"Invalid path: {path}")

    def _analyze_file(self, file_path: Path) -> Dict[str, Any]:
        """
        Analyze a single file.

        Args:
            file_path: Path to the JavaScript or HTML file

        Returns:
            Dictionary containing analysis results for the file
        """
        logger.log(logging.INFO if self.verbose else logging.DEBUG, "Analyzing file: %s", file_path)

        if file_path.suffix.lower() not in SUPPORTED_SUFFIXES:
            return {
                "file": str(file_path),
                "skipped": True,
                "reason": "Not a JavaScript or HTML file",
            }

        findings = []
        global_accesses = set()
        errors = []

        try:
            blocks = self.parser.parse_file(file_path)
        except OSError as e:
            return {"file": str(file_path), "error": str(e)}

        for index, code in enumerate(blocks):
            name = str(file_path) if len(blocks) == 1 else f"{file_path}:block{index}"
            try:
                result = self.analyzer.analyze(code, name)
            except ParseError as e:
                errors.append(str(e))
                continue
            findings.extend(result.findings)
            global_accesses |= result.global_accesses

        file_result: Dict[str, Any] = {
            "file": str(file_path),
            "findings": [f.to_dict() for f in findings],
            "finding_count": len(findings),
            "global_accesses": sorted(global_accesses),
        }
        if errors:
            file_result["error"] = "; ".join(errors)
        return file_result

    def _analyze_directory(self, dir_path: Path) -> Dict[str, Any]:
        """
        Analyze all JavaScript and HTML files in a directory recursively.

        Args:
            dir_path: Path to the directory

        Returns:
            Dictionary containing analysis results for all files
        """
        logger.log(logging.INFO if self.verbose else logging.DEBUG, "Analyzing directory: %s", dir_path)

        results: Dict[str, Any] = {
            "directory": str(dir_path),
            "files": [],
            "total_findings": 0,
        }

        files = sorted(
            p for p in dir_path.rglob("*")
            if p.is_file() and p.suffix.lower() in SUPPORTED_SUFFIXES
        )
        for file_path in files:
            file_result = self._analyze_file(file_path)
            results["files"].append(file_result)
            results["total_findings"] += file_result.get("finding_count", 0)

        return results

    def print_results(self, results: Dict[str, Any]) -> None:
        """
        Print analysis results to stdout in a human-readable format.

        Args:
            results: Analysis results dictionary
        """
        if "directory" in results:
            print(f"\n=== Analysis Results for {results['directory']} ===\n")
            print(f"Files analyzed: {len(results['files'])}")
            print(f"Total findings: {results['total_findings']}\n")

            for file_result in results["files"]:
                self._print_single_file_result(file_result)
        else:
            self._print_single_file_result(results, header=True)

    def _print_single_file_result(self, result: Dict[str, Any], header: bool = False) -> None:
        """Helper to print result for a single file."""
        file_path = result.get("file", "Unknown")

        if header:
            print(f"\n=== Analysis Results for {file_path} ===\n")

        if result.get("skipped"):
            if header:
                print(f"Skipped: {result['reason']}")
            return

        if "error" in result and not result.get("findings"):
            print(f"[-] {file_path}: Error - {result['error']}")
            return

        count = result.get("finding_count", 0)
        if count > 0:
            print(f"[!] {file_path}: {count} finding(s)")
        else:
            print(f"[+] {file_path}: No findings detected")

        for finding in result.get("findings", []):
            print(f"   [{finding['confidence'].upper()}] {finding['source'] or '-'} -> {finding['sink']}: "
                  f"{finding['description']}")
            if header and finding["evidence"]:
                print(f"     Evidence: {finding['evidence']}")

        if header and result.get("global_accesses"):
            print(f"\nImplicit globals: {', '.join(result['global_accesses'])}")

    def save_results(self, results: Dict[str, Any], output_path: Path) -> None:
        """
        Save analysis results to a JSON file.

        Args:
            results: Analysis results dictionary
            output_path: Path to save the results
        """
        with open(output_path, "w") as f:
            json.dump(results, f, indent=2)

        logger.log(logging.INFO if self.verbose else logging.DEBUG, "Results saved to %s", output_path)
