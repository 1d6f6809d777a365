"""
Type Resolver - Render Go type expressions from the tree-sitter syntax tree
as canonical strings.

Only a small closed set of type forms is understood. Everything else comes
back as UNRESOLVED, with an empty canonical text; two unresolved types
therefore compare equal unless strict mode swaps in their source text.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from tree_sitter import Node


class TypeKind(Enum):
    IDENTIFIER = "identifier"
    EMPTY_INTERFACE = "empty_interface"
    SLICE = "slice"
    POINTER = "pointer"
    QUALIFIED = "qualified"
    UNRESOLVED = "unresolved"


@dataclass(frozen=True)
class ResolvedType:
    """A type expression reduced to its canonical text."""
    kind: TypeKind
    text: str
    raw: str = ""

    @property
    def resolved(self) -> bool:
        return self.kind != TypeKind.UNRESOLVED

    def canonical(self, strict: bool = False) -> str:
        """Text used for comparison and display.

        Unresolved types yield "" unless ``strict`` is set, in which case
        their whitespace-normalised source text is used instead.
        """
        if self.resolved:
            return self.text
        return self.raw if strict else ""


IDENTIFIER_NODES = ('type_identifier', 'identifier')

# Shown in place of an unresolved type; never used for comparison.
UNRESOLVED_PLACEHOLDER = "?"


def node_text(node: Node) -> str:
    return node.text.decode('utf-8') if node.text is not None else ""


def normalize(text: str) -> str:
    """Collapse whitespace runs so that formatting never changes a type."""
    return ' '.join(text.split())


def _type_children(node: Node):
    return [c for c in node.named_children if c.type != 'comment']


def _unresolved(node: Node) -> ResolvedType:
    return ResolvedType(TypeKind.UNRESOLVED, "", normalize(node_text(node)))


def _wrap(kind: TypeKind, prefix: str, inner: Optional[Node], node: Node) -> ResolvedType:
    if inner is None:
        return _unresolved(node)
    resolved = resolve_type(inner)
    if not resolved.resolved:
        return _unresolved(node)
    return ResolvedType(kind, prefix + resolved.text, normalize(node_text(node)))


def resolve_type(node: Optional[Node]) -> ResolvedType:
    """Resolve a type-expression node.

    Identifiers are kept verbatim, ``interface{}`` is recognized, slices and
    arrays render as ``[]T``, pointers as ``*T`` and qualified names as
    ``pkg.Name``. A composite whose element cannot be resolved is itself
    unresolved.
    """
    if node is None:
        return ResolvedType(TypeKind.UNRESOLVED, "", "")

    kind = node.type

    if kind in IDENTIFIER_NODES:
        text = node_text(node)
        return ResolvedType(TypeKind.IDENTIFIER, text, text)

    if kind == 'interface_type':
        if _type_children(node):
            return _unresolved(node)
        return ResolvedType(TypeKind.EMPTY_INTERFACE, "interface{}", normalize(node_text(node)))

    if kind in ('slice_type', 'array_type'):
        # Array lengths are dropped, [4]T and []T render alike.
        return _wrap(TypeKind.SLICE, "[]", node.child_by_field_name('element'), node)

    if kind == 'pointer_type':
        children = _type_children(node)
        return _wrap(TypeKind.POINTER, "*", children[0] if children else None, node)

    if kind == 'qualified_type':
        package = node.child_by_field_name('package')
        name = node.child_by_field_name('name')
        if package is None or name is None:
            return _unresolved(node)
        text = f"{node_text(package)}.{node_text(name)}"
        return ResolvedType(TypeKind.QUALIFIED, text, text)

    return _unresolved(node)
