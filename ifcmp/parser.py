"""
Code Parser - Extract Go interface method sets using tree-sitter.

The Go grammar comes from the tree-sitter-go package. Only top-level type
declarations are searched, and only method members of the interface are
kept; embedded interfaces and constraint elements are skipped.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Iterator, List, Optional, Tuple, Any

import tree_sitter_go
from tree_sitter import Language, Node, Parser, Tree

from .errors import FileReadError, InterfaceNotFound, NotAnInterface, ParseError
from .trace import Trace
from .type_resolver import UNRESOLVED_PLACEHOLDER, node_text, resolve_type

logger = logging.getLogger(__name__)

GO_LANGUAGE = Language(tree_sitter_go.language())

METHOD_NODES = ('method_elem', 'method_spec')
PARAMETER_NODES = ('parameter_declaration', 'variadic_parameter_declaration')


@dataclass(frozen=True)
class Parameter:
    """One parameter declaration: zero or more names sharing a type."""
    names: Tuple[str, ...]
    type: str
    variadic: bool = False
    resolved: bool = field(default=True, compare=False)

    def render(self) -> str:
        shown = self.type or UNRESOLVED_PLACEHOLDER
        type_text = ("..." + shown) if self.variadic else shown
        if not self.names:
            return type_text
        return f"{', '.join(self.names)} {type_text}"

    def to_dict(self) -> Dict[str, Any]:
        return {
            'names': list(self.names),
            'type': self.type,
            'variadic': self.variadic,
            'resolved': self.resolved,
        }


@dataclass(frozen=True)
class MethodSignature:
    """A method of an interface.

    ``index`` is the member's position in the interface body and ``line`` its
    1-based line; neither takes part in equality.
    """
    name: str
    params: Tuple[Parameter, ...] = ()
    results: Tuple[str, ...] = ()
    index: int = field(default=0, compare=False)
    line: int = field(default=0, compare=False)

    def render(self) -> str:
        text = f"{self.name}({', '.join(p.render() for p in self.params)})"
        results = [r or UNRESOLVED_PLACEHOLDER for r in self.results]
        if len(results) == 1:
            text += " " + results[0]
        elif results:
            text += " (" + ", ".join(results) + ")"
        return text

    def __str__(self) -> str:
        return self.render()

    def to_dict(self) -> Dict[str, Any]:
        return {
            'name': self.name,
            'params': [p.to_dict() for p in self.params],
            'results': list(self.results),
            'index': self.index,
            'line': self.line,
            'signature': self.render(),
        }


SignatureMap = Dict[str, MethodSignature]


@dataclass
class GoSource:
    """A parsed Go compilation unit."""
    text: str
    tree: Tree
    path: str = "<memory>"

    @property
    def root(self) -> Node:
        return self.tree.root_node


def _walk(node: Node) -> Iterator[Node]:
    stack = [node]
    while stack:
        current = stack.pop()
        yield current
        stack.extend(reversed(current.children))


def _first_error(root: Node) -> Optional[Node]:
    if not root.has_error:
        return None
    for node in _walk(root):
        if node.type == 'ERROR' or node.is_missing:
            return node
    return root


def _check_package_clause(root: Node, path: str) -> None:
    """A Go file has exactly one package clause, and it comes first."""
    decls = [n for n in root.named_children if n.type != 'comment']
    if not decls or decls[0].type != 'package_clause':
        at = decls[0].start_point if decls else (0, 0)
        raise ParseError("expected 'package'", path=path, line=at[0] + 1, column=at[1] + 1)
    for extra in decls[1:]:
        if extra.type == 'package_clause':
            raise ParseError("expected declaration, found 'package'", path=path,
                             line=extra.start_point[0] + 1, column=extra.start_point[1] + 1)


class GoParser:
    """Parse Go source text into a tree-sitter syntax tree."""

    def __init__(self):
        self._parser = Parser(GO_LANGUAGE)

    def parse(self, text: str, path: str = "<memory>") -> GoSource:
        tree = self._parser.parse(text.encode('utf-8'))
        error = _first_error(tree.root_node)
        if error is not None:
            line = error.start_point[0] + 1
            column = error.start_point[1] + 1
            if error.is_missing:
                message = f"syntax error: missing {error.type}"
            else:
                snippet = ' '.join(node_text(error).split())[:40]
                message = f"syntax error near '{snippet}'"
            raise ParseError(message, path=path, line=line, column=column)
        _check_package_clause(tree.root_node, path)
        logger.debug("Parsed %s (%d bytes)", path, len(text))
        return GoSource(text=text, tree=tree, path=path)

    def parse_file(self, filepath: Path) -> GoSource:
        try:
            text = Path(filepath).read_text(encoding='utf-8')
        except (OSError, UnicodeDecodeError) as e:
            raise FileReadError(f"cannot read source file: {e}", path=str(filepath)) from e
        return self.parse(text, str(filepath))


class SignatureExtractor:
    """Build the method map of one named interface.

    With ``strict`` set, types outside the recognized set are compared and
    shown by their source text instead of as empty strings.
    """

    def __init__(self, strict: bool = False):
        self.strict = strict

    def find_type_spec(self, source: GoSource, interface_name: str) -> Node:
        """Return the first top-level type spec or alias named ``interface_name``."""
        for decl in source.root.named_children:
            if decl.type != 'type_declaration':
                continue
            for spec in decl.named_children:
                if spec.type not in ('type_spec', 'type_alias'):
                    continue
                name = spec.child_by_field_name('name')
                if name is not None and node_text(name) == interface_name:
                    return spec
        raise InterfaceNotFound(interface_name, path=source.path)

    def extract(self, source: GoSource, interface_name: str,
                trace: Optional[Trace] = None) -> SignatureMap:
        spec = self.find_type_spec(source, interface_name)
        if spec.type == 'type_alias':
            raise NotAnInterface(interface_name, 'type alias', path=source.path)

        body = spec.child_by_field_name('type')
        if body is None or body.type != 'interface_type':
            kind = body.type if body is not None else 'unknown'
            raise NotAnInterface(interface_name, kind, path=source.path)

        methods: SignatureMap = {}
        members = [m for m in body.named_children if m.type != 'comment']
        for index, member in enumerate(members):
            if member.type not in METHOD_NODES:
                if trace is not None:
                    trace.add('extract', f"{source.path}: skipped embedded member "
                                         f"'{node_text(member)}' of {interface_name}")
                continue

            name_node = member.child_by_field_name('name')
            if name_node is None:
                continue
            method = self._build_method(member, node_text(name_node), index, source.path, trace)
            if method.name in methods and trace is not None:
                trace.add('extract', f"{source.path}: method {method.name} declared twice, "
                                     f"keeping line {method.line}")
            methods[method.name] = method

        logger.debug("Extracted %d methods of %s from %s", len(methods), interface_name, source.path)
        return methods

    def _build_method(self, member: Node, name: str, index: int, path: str,
                      trace: Optional[Trace]) -> MethodSignature:
        params: List[Parameter] = []
        param_list = member.child_by_field_name('parameters')
        if param_list is not None:
            for decl in param_list.named_children:
                if decl.type not in PARAMETER_NODES:
                    continue
                params.append(self._build_parameter(decl, name, path, trace))

        results: List[str] = []
        result = member.child_by_field_name('result')
        if result is not None:
            if result.type == 'parameter_list':
                for decl in result.named_children:
                    if decl.type in PARAMETER_NODES:
                        results.append(self._type_string(decl.child_by_field_name('type'),
                                                         name, path, trace))
            else:
                results.append(self._type_string(result, name, path, trace))

        return MethodSignature(
            name=name,
            params=tuple(params),
            results=tuple(results),
            index=index,
            line=member.start_point[0] + 1,
        )

    def _build_parameter(self, decl: Node, method: str, path: str,
                         trace: Optional[Trace]) -> Parameter:
        names = tuple(node_text(n) for n in decl.children_by_field_name('name'))
        type_node = decl.child_by_field_name('type')
        resolved = resolve_type(type_node)
        if not resolved.resolved and trace is not None:
            trace.add('extract', f"{path}: unresolved type '{resolved.raw}' in {method}")
        return Parameter(
            names=names,
            type=resolved.canonical(self.strict),
            variadic=decl.type == 'variadic_parameter_declaration',
            resolved=resolved.resolved,
        )

    def _type_string(self, node: Optional[Node], method: str, path: str,
                     trace: Optional[Trace]) -> str:
        resolved = resolve_type(node)
        if not resolved.resolved and trace is not None:
            trace.add('extract', f"{path}: unresolved type '{resolved.raw}' in {method}")
        return resolved.canonical(self.strict)


def sort_methods(methods: SignatureMap) -> List[MethodSignature]:
    """Methods in declaration order."""
    return sorted(methods.values(), key=lambda m: m.index)
