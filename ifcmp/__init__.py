"""
ifcmp - Check that the Go interface shown in a README matches the source.
"""

__version__ = "0.1.0"

from .errors import (
    IfcmpError,
    UsageError,
    FileReadError,
    ParseError,
    InterfaceNotFound,
    NotAnInterface,
)
from .type_resolver import ResolvedType, TypeKind, resolve_type
from .parser import GoParser, GoSource, MethodSignature, Parameter, SignatureExtractor, SignatureMap
from .doc_parser import DocBlock, DocParser, SyntheticUnit
from .comparator import (
    CheckResult,
    Comparator,
    ComparisonResult,
    Discrepancy,
    DiscrepancyType,
    check_interface,
    signatures_equal,
)
from .trace import Trace, TraceEvent
from .reporter import Reporter, ReportConfig

__all__ = [
    "IfcmpError",
    "UsageError",
    "FileReadError",
    "ParseError",
    "InterfaceNotFound",
    "NotAnInterface",
    "ResolvedType",
    "TypeKind",
    "resolve_type",
    "GoParser",
    "GoSource",
    "MethodSignature",
    "Parameter",
    "SignatureExtractor",
    "SignatureMap",
    "DocBlock",
    "DocParser",
    "SyntheticUnit",
    "CheckResult",
    "Comparator",
    "ComparisonResult",
    "Discrepancy",
    "DiscrepancyType",
    "check_interface",
    "signatures_equal",
    "Trace",
    "TraceEvent",
    "Reporter",
    "ReportConfig",
]
