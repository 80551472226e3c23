"""Declaration extraction from PHP source using tree-sitter."""

import re
from typing import List, Optional, Tuple

import tree_sitter_php as tsphp
from tree_sitter import Language, Node, Parser

from .errors import ParseError
from .models import ParsedFile

CLASS_LIKE_TYPES = {
    "class_declaration",
    "interface_declaration",
    "trait_declaration",
    "enum_declaration",
}

# Constants declared directly in these bodies belong to a class.
CLASS_BODY_TYPES = {"declaration_list", "enum_declaration_list"}

LITERAL_PARTS = {"string_content", "string_value", "escape_sequence"}

SIMPLE_ESCAPES = {
    b"n": b"\n",
    b"t": b"\t",
    b"r": b"\r",
    b"v": b"\v",
    b"e": b"\x1b",
    b"f": b"\f",
    b"\\": b"\\",
    b"$": b"$",
    b'"': b'"',
}

# Any other backslash sequence is kept as written.
DOUBLE_QUOTE_ESCAPE = re.compile(
    rb'\\(?:([ntrvef\\$"])|([0-7]{1,3})|x([0-9A-Fa-f]{1,2})|u\{([0-9A-Fa-f]+)\})'
)


def _node_text(node: Node) -> str:
    return (node.text or b"").decode("utf-8", errors="replace")


def _unescape_double_quoted(body: bytes) -> str:
    def replace(match: "re.Match[bytes]") -> bytes:
        simple, octal, hexadecimal, codepoint = match.groups()
        if simple is not None:
            return SIMPLE_ESCAPES[simple]
        if octal is not None:
            return bytes([int(octal, 8) & 0xFF])
        if hexadecimal is not None:
            return bytes([int(hexadecimal, 16)])
        value = int(codepoint, 16)
        if value > 0x10FFFF:
            return match.group(0)
        return chr(value).encode("utf-8", errors="surrogatepass")

    return DOUBLE_QUOTE_ESCAPE.sub(replace, body).decode("utf-8", errors="replace")


def _namespace_prefix(node: Node) -> str:
    name = node.child_by_field_name("name")
    if name is None:
        return ""
    return _node_text(name).strip("\\") + "\\"


def _first_error(node: Node) -> Optional[Node]:
    stack = [node]
    while stack:
        current = stack.pop()
        if current.is_error or current.is_missing:
            return current
        if current.has_error:
            stack.extend(reversed(current.children))
    return None


def _string_literal(node: Node) -> Optional[str]:
    """Value of a quoted string without interpolation, else None."""
    text = _node_text(node)
    if node.type == "string" and len(text) >= 2 and text[-1] == "'":
        body = text[text.index("'") + 1:-1]
        return body.replace("\\\\", "\x00").replace("\\'", "'").replace("\x00", "\\")
    if node.type == "encapsed_string" and len(text) >= 2 and text[-1] == '"':
        if any(child.type not in LITERAL_PARTS for child in node.named_children):
            return None
        raw = node.text or b""
        return _unescape_double_quoted(raw[raw.index(b'"') + 1:-1])
    return None


class DeclarationExtractor:
    """Finds classes, functions and constants declared in PHP source."""

    def __init__(self):
        self.language = Language(tsphp.language_php())
        self.parser = Parser(self.language)

    def extract(self, source: bytes) -> ParsedFile:
        """Parse ``source`` and return its declarations in document order.

        Raises ParseError if the source contains syntax errors.
        """
        tree = self.parser.parse(source)
        root = tree.root_node
        if root.has_error:
            error = _first_error(root) or root
            line, column = error.start_point
            if error.is_missing:
                message = f"missing {error.type}"
            else:
                message = f"unexpected {_node_text(error)[:40]!r}"
            raise ParseError(message, line=line + 1, column=column + 1)

        classes: List[str] = []
        functions: List[str] = []
        constants: List[str] = []

        # Each work item carries its own namespace prefix and whether it sits
        # directly in a class body.
        stack: List[Tuple[Node, str, bool]] = [(root, "", False)]
        while stack:
            node, prefix, in_class_body = stack.pop()

            if node.type in CLASS_LIKE_TYPES:
                name = node.child_by_field_name("name")
                if name is not None:
                    classes.append(prefix + _node_text(name))
            elif node.type == "function_definition":
                name = node.child_by_field_name("name")
                if name is not None:
                    functions.append(prefix + _node_text(name))
            elif node.type == "const_declaration" and not in_class_body:
                for element in node.named_children:
                    if element.type != "const_element":
                        continue
                    for child in element.named_children:
                        if child.type == "name":
                            constants.append(prefix + _node_text(child))
                            break
            elif node.type == "function_call_expression":
                constant = self._defined_constant(node)
                if constant is not None:
                    constants.append(constant)

            child_prefix = prefix
            if node.type == "namespace_definition":
                child_prefix = _namespace_prefix(node)
            child_in_class_body = node.type in CLASS_BODY_TYPES

            pending = []
            for child in node.children:
                pending.append((child, child_prefix, child_in_class_body))
                # "namespace Foo;" applies to the statements after it
                if child.type == "namespace_definition" and child.child_by_field_name("body") is None:
                    child_prefix = _namespace_prefix(child)
            stack.extend(reversed(pending))

        return ParsedFile(
            classes=tuple(classes),
            functions=tuple(functions),
            constants=tuple(constants),
        )

    @staticmethod
    def _defined_constant(node: Node) -> Optional[str]:
        """Constant name of a define() call, None for any other call."""
        function = node.child_by_field_name("function")
        if function is None or function.type not in ("name", "qualified_name"):
            return None
        if _node_text(function).lstrip("\\").lower() != "define":
            return None

        arguments = node.child_by_field_name("arguments")
        argument = None
        if arguments is not None:
            argument = next((c for c in arguments.named_children if c.type == "argument"), None)
        if argument is None or not argument.named_children:
            return "define()"

        value = argument.named_children[-1]
        literal = _string_literal(value)
        if literal is not None:
            return literal
        # Not resolvable statically, but the file still has to load eagerly.
        return _node_text(value)
