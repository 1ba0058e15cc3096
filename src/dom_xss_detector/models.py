"""
Result types shared by the static and dynamic passes.
"""

from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Set, Tuple


class Confidence(str, Enum):
    HIGH = "High"


@dataclass
class Finding:
    """
    One detected or suspected taint flow into a sink.

    ``line`` is always 0 for static findings: the walker does not carry
    source positions, so results are accurate to content, not location.
    ``evidence`` holds the source text that produced the flow.
    """
    source: str
    sink: str
    line: int = 0
    confidence: Confidence = Confidence.HIGH
    description: str = ""
    evidence: str = ""

    def dedup_key(self) -> Tuple[str, str, str]:
        return (self.source, self.sink, self.description)

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["confidence"] = self.confidence.value
        return data


@dataclass
class AnalysisResult:
    """Merged output of one ``analyze`` call."""
    findings: List[Finding] = field(default_factory=list)
    global_accesses: Set[str] = field(default_factory=set)
    emulation_error: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "findings": [f.to_dict() for f in self.findings],
            "finding_count": len(self.findings),
            "global_accesses": sorted(self.global_accesses),
            "emulation_error": self.emulation_error,
        }
