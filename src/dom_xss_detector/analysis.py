"""
Analysis module that runs the static and dynamic passes and merges them.

The static pass (Propagator) follows named values through the scope chain;
the dynamic pass (Emulator) executes the script with trapped sinks to catch
flows hidden behind string building. Both produce Findings that are merged
and deduplicated on (source, sink, description). The two passes fill those
fields differently, so one flow seen by both is reported twice, once per
technique.
"""

import logging
from typing import Iterable, List, Optional, Sequence, Set, Tuple

from .emulator import Emulator
from .exceptions import EmulationError
from .models import AnalysisResult, Finding
from .parser import JavaScriptParser
from .patterns import DEFAULT_SINK_PATTERNS, DEFAULT_SOURCE_PATTERNS
from .propagator import Propagator
from .tracker import Tracker

logger = logging.getLogger(__name__)


def deduplicate(findings: Iterable[Finding]) -> List[Finding]:
    """
    Drop repeated findings, keeping the first occurrence of each key.

    Args:
        findings: Findings in report order

    Returns:
        Findings with unique (source, sink, description)
    """
    seen: Set[Tuple[str, str, str]] = set()
    unique = []
    for finding in findings:
        key = finding.dedup_key()
        if key not in seen:
            seen.add(key)
            unique.append(finding)
    return unique


class DomXssAnalyzer:
    """
    Orchestrates one analysis of a JavaScript source text.

    A Tracker, Propagator and Emulator are created per ``analyze`` call and
    dropped afterwards, so an analyzer instance can be reused and calls on
    separate threads share no state.
    """

    def __init__(self, source_patterns: Optional[Sequence[str]] = None,
                 sink_patterns: Optional[Sequence[str]] = None,
                 emulate: bool = True, verbose: bool = False):
        """
        Initialize the analyzer.

        Args:
            source_patterns: Source regexes (defaults to DEFAULT_SOURCE_PATTERNS)
            sink_patterns: Sink regexes (defaults to DEFAULT_SINK_PATTERNS)
            emulate: Run the dynamic emulation pass
            verbose: Log progress at INFO instead of DEBUG

        Raises:
            PatternError: If a source or sink pattern is invalid
        """
        self.source_patterns = list(DEFAULT_SOURCE_PATTERNS if source_patterns is None else source_patterns)
        self.sink_patterns = list(DEFAULT_SINK_PATTERNS if sink_patterns is None else sink_patterns)
        self.emulate = emulate
        self.verbose = verbose
        self.parser = JavaScriptParser(verbose=verbose)

        # Fail fast on invalid patterns; each call still builds its own Tracker
        Tracker(self.source_patterns, self.sink_patterns)

    def analyze(self, code: str, filename: str = "<string>") -> AnalysisResult:
        """
        Analyze JavaScript source for DOM XSS flows.

        Args:
            code: JavaScript source text
            filename: Name used in error messages

        Returns:
            AnalysisResult with merged findings and implicit global names

        Raises:
            ParseError: If the code cannot be parsed
            PatternError: If a source or sink pattern is invalid
        """
        tracker = Tracker(self.source_patterns, self.sink_patterns)
        program = self.parser.parse_code(code, filename)

        propagator = Propagator(tracker, code)
        findings = list(propagator.run(program))

        self._log("Static pass on %s: %d finding(s)", filename, len(findings))

        emulation_error = None
        if self.emulate:
            emulator = Emulator()
            try:
                emulator.run(code)
            except EmulationError as e:
                # Best-effort: missing DOM APIs and timeouts are expected
                emulation_error = str(e)
                logger.debug("Emulation of %s failed: %s", filename, e)
            findings.extend(emulator.findings)
            self._log("Dynamic pass on %s: %d finding(s)", filename, len(emulator.findings))

        return AnalysisResult(
            findings=deduplicate(findings),
            global_accesses=set(propagator.global_accesses),
            emulation_error=emulation_error,
        )

    def _log(self, message: str, *args) -> None:
        logger.log(logging.INFO if self.verbose else logging.DEBUG, message, *args)


def analyze(code: str, source_patterns: Optional[Sequence[str]] = None,
            sink_patterns: Optional[Sequence[str]] = None,
            emulate: bool = True) -> AnalysisResult:
    """
    Analyze JavaScript source with a fresh analyzer.

    Args:
        code: JavaScript source text
        source_patterns: Source regexes (None for the defaults)
        sink_patterns: Sink regexes (None for the defaults)
        emulate: Run the dynamic emulation pass

    Returns:
        AnalysisResult with merged findings and implicit global names
    """
    analyzer = DomXssAnalyzer(source_patterns, sink_patterns, emulate=emulate)
    return analyzer.analyze(code)
