import re
from typing import NamedTuple

from lark import Discard, Token, Transformer
from lark.exceptions import VisitError

from .errors import ParseError
from .escapes import strip_quotes
from .parser import parse_tree

MAX_SAFE_INTEGER = 2 ** 53 - 1

_INTEGER = re.compile(r"0|[1-9][0-9]*")
_DECIMAL = re.compile(r"[0-9]+\.[0-9]*[1-9]")


class Scalar(NamedTuple):
    text: str
    quoted: bool


def coerce_number(literal):
    """Return ``literal`` as a number if writing it back gives the same text."""
    if _INTEGER.fullmatch(literal):
        number = int(literal)
        return number if number <= MAX_SAFE_INTEGER else literal
    if _DECIMAL.fullmatch(literal) and repr(float(literal)) == literal:
        return float(literal)
    return literal


def decode_data(token):
    digits = "".join(token[1:-1].split())
    try:
        return bytes.fromhex(digits)
    except ValueError:
        raise ParseError(
            f"Invalid data literal at line {token.line}, column {token.column}",
            token.line,
            token.column,
        ) from None


def _nodes(children):
    return [child for child in children if not isinstance(child, Token)]


# ----------------------
# Transformer
# ----------------------
class ValueBuilder(Transformer):
    """Fold the concrete syntax tree into plain Python values."""

    def COMMENT(self, token):
        return Discard

    def head(self, children):
        (root,) = _nodes(children)
        return root

    def object(self, children):
        return dict(_nodes(children))

    def object_item(self, children):
        key, value = _nodes(children)
        return key.text, value

    def array(self, children):
        return _nodes(children)

    def identifier(self, children):
        (token,) = children
        if token.type == "QUOTED_STRING":
            return Scalar(strip_quotes(token[1:-1]), True)
        return Scalar(str(token), False)

    def value(self, children):
        (child,) = children
        if isinstance(child, Scalar):
            return child.text if child.quoted else coerce_number(child.text)
        if isinstance(child, Token):
            return decode_data(child)
        return child


def parse(text):
    """Parse pbxproj ``text`` into dicts, lists, strings, numbers and bytes."""
    tree = parse_tree(text)
    try:
        return ValueBuilder().transform(tree)
    except VisitError as e:
        if isinstance(e.orig_exc, ParseError):
            raise e.orig_exc from None
        raise
