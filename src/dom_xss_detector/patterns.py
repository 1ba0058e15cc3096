"""
Default source and sink patterns for DOM XSS detection.

Patterns are raw regular expressions searched (not full-matched) against
dotted access paths such as ``location.hash`` or ``document.write(``.
Call sinks end in ``\\(`` and assignment sinks in ``=`` because the
propagator also tests names with those suffixes appended.
"""

# Attacker-controllable inputs
DEFAULT_SOURCE_PATTERNS = [
    r"location\.search",
    r"location\.hash",
    r"location\.href",
    r"location\.pathname",
    r"location\.ancestorOrigins",
    r"document\.URL",
    r"document\.documentURI",
    r"document\.referrer",
    r"document\.baseURI",
    r"window\.name",
    r"window\.opener\.location",
    r"URLSearchParams",
    r"document\.cookie",
    r"localStorage",
    r"sessionStorage",
    r"navigation\.currentEntry",
    r"event\.data",  # postMessage
    r"e\.data",
]

# Dangerous execution and injection points
DEFAULT_SINK_PATTERNS = [
    # Execution
    r"eval\(",
    r"setTimeout\(",
    r"setInterval\(",
    r"setImmediate\(",
    r"execScript\(",
    r"Function\(",
    r"importScripts\(",
    # HTML injection
    r"innerHTML",
    r"outerHTML",
    r"insertAdjacentHTML",
    r"document\.write\(",
    r"document\.writeln\(",
    r"createContextualFragment\(",
    r"document\.implementation\.createHTMLDocument\(",
    # Navigation / open redirect
    r"location\.href\s*=",
    r"location\.replace\(",
    r"location\.assign\(",
    r"navigation\.navigate\(",
    r"javascript:",
    # DOM attributes and methods
    r"\.src\s*=",
    r"\.href\s*=",
    r"\.srcdoc\s*=",
    r"setAttribute\(",
    # jQuery
    r"\.html\(",
    r"\.append\(",
    r"\.prepend\(",
    r"\.wrap\(",
    r"\.after\(",
    r"\.before\(",
    r"\.attr\(",
    # AngularJS
    r"\$compile\(",
    r"\$sce\.trustAsHtml\(",
    # React
    r"dangerouslySetInnerHTML",
    # Prototype pollution
    r"__proto__",
    r"prototype",
    r"constructor",
]

# Properties that never carry attacker data, whatever the object
SAFE_PROPERTIES = frozenset({"length", "constructor", "prototype"})

# Path fragments that make an assignment suspicious on their own
PROTOTYPE_PROPERTIES = ("__proto__", "prototype", "constructor")
