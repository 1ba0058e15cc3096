"""
DomTaint - DOM XSS detection for JavaScript

Traces attacker-controlled sources (location.hash, document.URL, ...) to
dangerous sinks (eval, innerHTML, ...) with a scope-aware static taint pass,
and runs the code under trapped sinks to catch obfuscated flows.
"""

__version__ = "0.1.0"

from .analysis import DomXssAnalyzer, analyze
from .detector import DomXssDetector
from .emulator import Emulator
from .exceptions import DomTaintError, EmulationError, ParseError, PatternError
from .models import AnalysisResult, Confidence, Finding
from .propagator import Propagator
from .scope import Scope, ScopeKind, Variable
from .tracker import Tracker
from .config import Config, config

__all__ = [
    "analyze",
    "DomXssAnalyzer",
    "DomXssDetector",
    "Emulator",
    "Propagator",
    "Tracker",
    "Scope",
    "ScopeKind",
    "Variable",
    "Finding",
    "Confidence",
    "AnalysisResult",
    "DomTaintError",
    "ParseError",
    "PatternError",
    "EmulationError",
    "Config",
    "config",
]
