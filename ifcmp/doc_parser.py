"""
Documentation Parser - Pull the documented interface out of a Markdown file.

Fenced code blocks tagged with the source language are found with
markdown-it-py. The ones that declare the target interface are joined into
a synthetic Go file that the code parser can read like any other source.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

from markdown_it import MarkdownIt

from .errors import FileReadError

logger = logging.getLogger(__name__)

PACKAGE_HEADER = "package main\n"


@dataclass(frozen=True)
class DocBlock:
    """A fenced code block; ``line`` is the README line of its first content line."""
    language: str
    content: str
    line: int


@dataclass
class SyntheticUnit:
    """Go source assembled from README blocks."""
    text: str = PACKAGE_HEADER
    blocks: List[DocBlock] = field(default_factory=list)
    line_map: List[Optional[int]] = field(default_factory=lambda: [None])

    def doc_line(self, unit_line: int) -> Optional[int]:
        """Map a 1-based line of the synthetic unit to its README line."""
        if 1 <= unit_line <= len(self.line_map):
            return self.line_map[unit_line - 1]
        return None

    @property
    def empty(self) -> bool:
        return not self.blocks


def declaration_header(interface_name: str) -> str:
    return f"type {interface_name} interface"


class DocParser:
    """Locate documented interface declarations in Markdown."""

    def __init__(self, language: str = "go"):
        self.language = language
        self._md = MarkdownIt("commonmark")

    def code_blocks(self, markdown: str) -> List[DocBlock]:
        blocks = []
        for token in self._md.parse(markdown):
            if token.type != 'fence':
                continue
            info = token.info.strip().split()
            language = info[0] if info else ""
            # token.map spans the fence lines; content starts one line in.
            line = token.map[0] + 2 if token.map else 0
            blocks.append(DocBlock(language=language, content=token.content, line=line))
        return blocks

    def locate(self, markdown: str, interface_name: str) -> SyntheticUnit:
        """Join every matching block, in document order, into one Go unit."""
        header = declaration_header(interface_name)
        unit = SyntheticUnit()
        parts = [PACKAGE_HEADER]

        for block in self.code_blocks(markdown):
            if block.language != self.language:
                continue
            if header not in block.content:
                continue
            content = block.content if block.content.endswith('\n') else block.content + '\n'
            parts.append(content)
            unit.blocks.append(block)
            unit.line_map.extend(block.line + i for i in range(content.count('\n')))

        unit.text = "".join(parts)
        logger.debug("Matched %d %s block(s) declaring %s",
                     len(unit.blocks), self.language, interface_name)
        return unit

    def locate_file(self, filepath: Path, interface_name: str) -> SyntheticUnit:
        try:
            markdown = Path(filepath).read_text(encoding='utf-8')
        except (OSError, UnicodeDecodeError) as e:
            raise FileReadError(f"cannot read documentation file: {e}", path=str(filepath)) from e
        return self.locate(markdown, interface_name)
