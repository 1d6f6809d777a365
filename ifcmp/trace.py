"""
Trace - Diagnostic record of one check run.

A trace is filled in as the pipeline runs and handed back next to the
comparison result. Nothing in it is printed unless the caller asks for it.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List


@dataclass(frozen=True)
class TraceEvent:
    stage: str
    message: str

    def __str__(self) -> str:
        return f"[{self.stage}] {self.message}"


@dataclass
class Trace:
    """Ordered diagnostic events plus the intermediate artifacts of a run."""
    events: List[TraceEvent] = field(default_factory=list)
    synthetic_unit: str = ""
    actual_methods: List[str] = field(default_factory=list)
    documented_methods: List[str] = field(default_factory=list)

    def add(self, stage: str, message: str) -> None:
        self.events.append(TraceEvent(stage, message))

    def for_stage(self, stage: str) -> List[TraceEvent]:
        return [e for e in self.events if e.stage == stage]

    def render(self) -> str:
        lines = [str(e) for e in self.events]
        if self.actual_methods:
            lines.append("Actual methods (declaration order):")
            lines.extend(f"  {m}" for m in self.actual_methods)
        if self.documented_methods:
            lines.append("Readme methods (declaration order):")
            lines.extend(f"  {m}" for m in self.documented_methods)
        if self.synthetic_unit:
            lines.append("Synthetic unit:")
            lines.append(self.synthetic_unit.rstrip('\n'))
        return "\n".join(lines)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'events': [{'stage': e.stage, 'message': e.message} for e in self.events],
            'synthetic_unit': self.synthetic_unit,
            'actual_methods': self.actual_methods,
            'documented_methods': self.documented_methods,
        }
