"""
Taint tracker: scope cursor plus compiled source/sink patterns.
"""

import re
from typing import List, Pattern, Sequence

from .exceptions import PatternError
from .scope import Scope, ScopeKind


def _compile_patterns(patterns: Sequence[str], kind: str) -> List[Pattern[str]]:
    compiled = []
    for pattern in patterns:
        try:
            compiled.append(re.compile(pattern))
        except re.error as e:
            raise PatternError(pattern, kind, str(e)) from e
    return compiled


class Tracker:
    """
    State for one analysis run.

    Owns the global scope, the current-scope cursor and the ordered lists
    of source and sink patterns. Patterns are matched with ``re.search``,
    so callers anchor them when they want a full-name match.
    """

    def __init__(self, source_patterns: Sequence[str], sink_patterns: Sequence[str]):
        """
        Initialize the tracker.

        Args:
            source_patterns: Regular expressions naming attacker-controlled values
            sink_patterns: Regular expressions naming dangerous operations

        Raises:
            PatternError: If any pattern fails to compile
        """
        self.source_patterns = _compile_patterns(source_patterns, "source")
        self.sink_patterns = _compile_patterns(sink_patterns, "sink")
        self.global_scope = Scope(ScopeKind.GLOBAL)
        self.current_scope = self.global_scope

    def is_source(self, name: str) -> bool:
        return any(p.search(name) for p in self.source_patterns)

    def is_sink(self, name: str) -> bool:
        return any(p.search(name) for p in self.sink_patterns)

    def enter_scope(self, kind: ScopeKind) -> Scope:
        """Push a new scope under the current one and make it current."""
        self.current_scope = Scope(kind, parent=self.current_scope)
        return self.current_scope

    def leave_scope(self) -> None:
        """Pop to the parent scope. Never pops past the global scope."""
        if self.current_scope.parent is not None:
            self.current_scope = self.current_scope.parent
