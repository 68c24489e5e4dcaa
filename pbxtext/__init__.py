"""pbxtext: read and write Xcode project.pbxproj files without losing a byte."""

from .builder import parse
from .comments import create_reference_list
from .errors import ConsistencyError, LexError, MacroCycleError, ParseError, PbxprojError
from .escapes import add_quotes, ensure_quotes, strip_quotes
from .isa import Isa
from .macros import resolve_build_setting
from .parser import lex, parse_tree
from .writer import Writer, build

__all__ = [
    "parse",
    "build",
    "Writer",
    "lex",
    "parse_tree",
    "create_reference_list",
    "resolve_build_setting",
    "strip_quotes",
    "add_quotes",
    "ensure_quotes",
    "Isa",
    "PbxprojError",
    "LexError",
    "ParseError",
    "ConsistencyError",
    "MacroCycleError",
]
