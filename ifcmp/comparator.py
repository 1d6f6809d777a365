"""
Comparator - Diff the real interface against the one shown in the README.
"""

import logging
from dataclasses import dataclass, field, replace
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Optional

from .doc_parser import DocParser
from .errors import InterfaceNotFound, NotAnInterface, ParseError
from .parser import GoParser, MethodSignature, SignatureExtractor, SignatureMap, sort_methods
from .trace import Trace

logger = logging.getLogger(__name__)


class DiscrepancyType(Enum):
    MISMATCH = "mismatch"
    MISSING_FROM_DOCS = "missing_from_docs"
    MISSING_FROM_SOURCE = "missing_from_source"


@dataclass(frozen=True)
class Discrepancy:
    """One method whose README entry disagrees with the code."""
    kind: DiscrepancyType
    method: str
    actual: Optional[MethodSignature] = None
    documented: Optional[MethodSignature] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            'kind': self.kind.value,
            'method': self.method,
            'actual': self.actual.to_dict() if self.actual else None,
            'documented': self.documented.to_dict() if self.documented else None,
        }


@dataclass
class ComparisonResult:
    """Discrepancies found by a comparison, in report order."""
    discrepancies: List[Discrepancy] = field(default_factory=list)
    stats: Dict[str, int] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return not self.discrepancies

    def filter_by_kind(self, kind: DiscrepancyType) -> List[Discrepancy]:
        return [d for d in self.discrepancies if d.kind == kind]

    def to_dict(self) -> Dict[str, Any]:
        return {
            'discrepancies': [d.to_dict() for d in self.discrepancies],
            'stats': self.stats,
            'summary': {
                'total': len(self.discrepancies),
                'mismatch': len(self.filter_by_kind(DiscrepancyType.MISMATCH)),
                'missing_from_docs': len(self.filter_by_kind(DiscrepancyType.MISSING_FROM_DOCS)),
                'missing_from_source': len(self.filter_by_kind(DiscrepancyType.MISSING_FROM_SOURCE)),
            }
        }


def signatures_equal(a: MethodSignature, b: MethodSignature) -> bool:
    """Compare parameters and results position by position.

    Parameter names are order-sensitive. Declaration position and line
    never matter.
    """
    return a.params == b.params and a.results == b.results


class Comparator:
    """Compare two method maps of the same interface."""

    def compare(self, actual: SignatureMap, documented: SignatureMap) -> ComparisonResult:
        result = ComparisonResult()
        matched = 0

        for name in sorted(actual):
            method = actual[name]
            doc_method = documented.get(name)
            if doc_method is None:
                result.discrepancies.append(Discrepancy(
                    kind=DiscrepancyType.MISSING_FROM_DOCS,
                    method=name,
                    actual=method,
                ))
            elif not signatures_equal(method, doc_method):
                result.discrepancies.append(Discrepancy(
                    kind=DiscrepancyType.MISMATCH,
                    method=name,
                    actual=method,
                    documented=doc_method,
                ))
            else:
                matched += 1

        for name in sorted(documented):
            if name not in actual:
                result.discrepancies.append(Discrepancy(
                    kind=DiscrepancyType.MISSING_FROM_SOURCE,
                    method=name,
                    documented=documented[name],
                ))

        result.stats = {
            'actual_methods': len(actual),
            'documented_methods': len(documented),
            'matched': matched,
        }
        return result


@dataclass
class CheckResult:
    """Outcome of checking one README against one source file."""
    result: ComparisonResult
    trace: Trace
    interface_name: str
    source_path: str
    doc_path: str

    @property
    def ok(self) -> bool:
        return self.result.ok


def check_interface(doc_path: Path, source_path: Path, interface_name: str,
                    language: str = "go", strict: bool = False) -> CheckResult:
    """Run the whole pipeline: parse both files, extract, compare.

    Failing to find the interface in the source raises. Failing to find it in
    the README leaves the documented side empty, so every real method is
    reported as missing from the docs.
    """
    trace = Trace()
    go_parser = GoParser()
    extractor = SignatureExtractor(strict=strict)

    source = go_parser.parse_file(source_path)
    actual = extractor.extract(source, interface_name, trace)
    trace.add('source', f"{source_path}: {len(actual)} method(s) in {interface_name}")

    unit = DocParser(language).locate_file(doc_path, interface_name)
    trace.synthetic_unit = unit.text
    trace.add('docs', f"{doc_path}: {len(unit.blocks)} matching {language} block(s)"
                      + (f" at line(s) {', '.join(str(b.line) for b in unit.blocks)}"
                         if unit.blocks else ""))

    try:
        doc_source = go_parser.parse(unit.text, str(doc_path))
    except ParseError as e:
        if e.line:
            e.line = unit.doc_line(e.line) or e.line
        raise

    try:
        documented = extractor.extract(doc_source, interface_name, trace)
    except (InterfaceNotFound, NotAnInterface) as e:
        logger.debug("README has no usable declaration: %s", e)
        trace.add('docs', f"{doc_path}: {e.message}; treating documented side as empty")
        documented = {}

    # Point documented methods at README lines rather than synthetic-unit lines.
    documented = {
        name: replace(method, line=unit.doc_line(method.line) or 0)
        for name, method in documented.items()
    }

    trace.actual_methods = [m.render() for m in sort_methods(actual)]
    trace.documented_methods = [m.render() for m in sort_methods(documented)]

    result = Comparator().compare(actual, documented)
    trace.add('compare', f"{len(result.discrepancies)} discrepancy(ies), "
                         f"{result.stats['matched']} matching method(s)")
    return CheckResult(
        result=result,
        trace=trace,
        interface_name=interface_name,
        source_path=str(source_path),
        doc_path=str(doc_path),
    )
