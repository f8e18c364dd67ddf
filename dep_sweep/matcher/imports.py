"""Tree-sitter import extraction for JavaScript and TypeScript sources."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable, Iterator

from tree_sitter_language_pack import get_parser

from dep_sweep.matcher.language_map import EXT_TO_GRAMMAR

logger = logging.getLogger(__name__)

_STRING_TYPES = {"string", "template_string"}


def _string_value(node) -> str | None:
    """Literal value of a string node, or None for anything dynamic."""
    if node is None or node.type not in _STRING_TYPES or not node.text:
        return None
    text = node.text.decode("utf-8", errors="replace")
    if len(text) < 2:
        return None
    value = text[1:-1]
    if node.type == "template_string" and "${" in value:
        return None
    return value


def _first_argument(node):
    args = node.child_by_field_name("arguments")
    if args is None:
        return None
    for child in args.named_children:
        return child
    return None


class ImportVisitor:
    """Yields module specifiers from a closed set of syntax node kinds.

    * import declarations (``import x from "a"``, ``export * from "a"``)
    * call expressions (``require("a")``, ``import("a")``, including ``typeof import("a")``)
    * external module references (``import x = require("a")``)
    """

    def __init__(self) -> None:
        self._handlers: dict[str, Callable] = {
            "import_statement": self._visit_import_declaration,
            "export_statement": self._visit_import_declaration,
            "call_expression": self._visit_call_expression,
            "import_require_clause": self._visit_external_module_reference,
        }

    def sources(self, root) -> Iterator[str]:
        stack = [root]
        while stack:
            node = stack.pop()
            handler = self._handlers.get(node.type)
            if handler is not None:
                source = handler(node)
                if source is not None:
                    yield source
            stack.extend(reversed(node.children))

    def _visit_import_declaration(self, node) -> str | None:
        return _string_value(node.child_by_field_name("source"))

    def _visit_call_expression(self, node) -> str | None:
        callee = node.child_by_field_name("function")
        if callee is None:
            return None
        if callee.type == "import" or (
            callee.type == "identifier" and callee.text == b"require"
        ):
            return _string_value(_first_argument(node))
        return None

    def _visit_external_module_reference(self, node) -> str | None:
        source = node.child_by_field_name("source")
        if source is None:
            source = next((c for c in node.named_children if c.type == "string"), None)
        return _string_value(source)


class ImportScanner:
    """Parses source files and lists the module specifiers they import."""

    def __init__(self) -> None:
        self._parser_cache: dict[str, object] = {}
        self._visitor = ImportVisitor()

    @staticmethod
    def supports(file_path: Path) -> bool:
        return file_path.suffix.lower() in EXT_TO_GRAMMAR

    def iter_sources(self, file_path: Path, source_bytes: bytes) -> Iterator[str]:
        """Module specifiers in a file; nothing if it cannot be parsed.

        A grammar that cannot be loaded raises instead of hiding every import.
        """
        grammar_name = EXT_TO_GRAMMAR.get(file_path.suffix.lower())
        if grammar_name is None:
            return iter(())
        parser = self._get_parser(grammar_name)
        try:
            tree = parser.parse(source_bytes)
        except Exception as e:
            logger.debug("Could not parse %s: %s", file_path, e)
            return iter(())
        return self._visitor.sources(tree.root_node)

    def _get_parser(self, grammar_name: str):
        if grammar_name not in self._parser_cache:
            self._parser_cache[grammar_name] = get_parser(grammar_name)
        return self._parser_cache[grammar_name]
