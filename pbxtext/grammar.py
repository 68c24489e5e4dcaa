from lark import Lark

# ----------------------
# Grammar
# ----------------------
GRAMMAR = r"""
head: array
    | object

array: LPAR (value SEPARATOR?)* RPAR
object: LBRACE object_item* RBRACE
object_item: identifier EQUAL value TERMINATOR

identifier: QUOTED_STRING
          | STRING_LITERAL

value: object
     | array
     | DATA_LITERAL
     | identifier

LBRACE: "{"
RBRACE: "}"
LPAR: "("
RPAR: ")"
EQUAL: "="
TERMINATOR: ";"
SEPARATOR: ","

QUOTED_STRING: /"(?:[^"\\]|\\[\s\S])*"/
             | /'(?:[^'\\]|\\[\s\S])*'/
STRING_LITERAL: /[A-Za-z0-9_$\/:.+\-]+/
DATA_LITERAL: /<[0-9a-fA-F\s]*>/

// --- IGNORED, BUT KEPT FOR THE CST ---

COMMENT.2: /\/\/[^\n]*/
         | /\/\*[^*]*\*+(?:[^\/*][^*]*\*+)*\//
%ignore COMMENT

WS: /[ \t\r\n]+/
%ignore WS
"""

# Terminal names as they appear in error messages.
TERMINAL_LABELS = {
    "LBRACE": "'{'",
    "RBRACE": "'}'",
    "LPAR": "'('",
    "RPAR": "')'",
    "EQUAL": "'='",
    "TERMINATOR": "';'",
    "SEPARATOR": "','",
    "QUOTED_STRING": "quoted string",
    "STRING_LITERAL": "string literal",
    "DATA_LITERAL": "data literal",
    "$END": "end of input",
}

OPENERS = {"LBRACE": "object", "LPAR": "array"}
CLOSERS = {"RBRACE": "LBRACE", "RPAR": "LPAR"}

# Compiled once; parse() and lex() keep all per-call state on their own.
PARSER = Lark(
    GRAMMAR,
    start="head",
    parser="lalr",
    lexer="basic",
    keep_all_tokens=True,
    propagate_positions=True,
    maybe_placeholders=False,
)
