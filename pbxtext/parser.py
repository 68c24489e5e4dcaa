import logging

from lark import Token
from lark.exceptions import UnexpectedCharacters, UnexpectedToken

from .errors import LexError, ParseError
from .grammar import CLOSERS, OPENERS, PARSER, TERMINAL_LABELS

log = logging.getLogger(__name__)


def lex(text):
    """Tokenize ``text``, keeping comments but dropping whitespace."""
    try:
        return [token for token in PARSER.lex(text, dont_ignore=True) if token.type != "WS"]
    except UnexpectedCharacters as e:
        raise _lex_error(e) from None


def parse_tree(text):
    """Parse ``text`` into a concrete syntax tree.

    Comments are not part of the grammar; they are put back into the tree
    right after the terminal that precedes them.
    """
    comments = [token for token in lex(text) if token.type == "COMMENT"]
    try:
        tree = PARSER.parse(text)
    except UnexpectedToken as e:
        raise _parse_error(text, e) from None
    _attach_comments(tree, comments)
    log.debug("parsed %d characters with %d comments", len(text), len(comments))
    return tree


# ----------------------
# Errors
# ----------------------
def _lex_error(error):
    if error.char in "\"'":
        return LexError(f"Unterminated string at line {error.line}", error.line)
    return LexError(
        f"Unexpected character '{error.char}' at line {error.line}, column {error.column}",
        error.line,
        error.column,
    )


def _end_position(text):
    line = text.count("\n") + 1
    column = len(text) - text.rfind("\n")
    return line, column


def _open_container(value_stack):
    """Name the innermost object or array that is still open."""
    opened = []
    for item in value_stack:
        if not isinstance(item, Token):
            continue
        if item.type in OPENERS:
            opened.append(item.type)
        elif item.type in CLOSERS and opened:
            opened.pop()
    return OPENERS[opened[-1]] if opened else None


def _describe(expected):
    labels = [label for name, label in TERMINAL_LABELS.items() if name in expected]
    if len(labels) == 1:
        return labels[0]
    return ", ".join(labels[:-1]) + " or " + labels[-1]


def _parse_error(text, error):
    interactive = error.interactive_parser
    if error.token.type == "$END":
        line, column = _end_position(text)
        context = _open_container(interactive.parser_state.value_stack) if interactive else None
        if context:
            return ParseError(
                f"Unexpected end of input in {context} at line {line}, column {column}",
                line,
                column,
            )
    else:
        line, column = error.token.line, error.token.column

    # The LALR state may have merged lookaheads; ask which tokens really fit.
    expected = interactive.accepts() if interactive else error.expected
    return ParseError(f"Expected {_describe(expected)} at line {line}, column {column}", line, column)


# ----------------------
# Comments
# ----------------------
def _terminals(tree):
    for subtree in tree.iter_subtrees_topdown():
        for child in subtree.children:
            if isinstance(child, Token):
                yield subtree, child


def _attach_comments(tree, comments):
    if not comments:
        return

    terminals = sorted(_terminals(tree), key=lambda entry: entry[1].start_pos)
    leading = []
    following = {}
    anchor = None
    position = 0
    for comment in comments:
        while position < len(terminals) and terminals[position][1].end_pos <= comment.start_pos:
            anchor = terminals[position]
            position += 1
        if anchor is None:
            leading.append(comment)
        else:
            following.setdefault(id(anchor[1]), (anchor, []))[1].append(comment)

    for (parent, token), attached in following.values():
        index = next(i for i, child in enumerate(parent.children) if child is token)
        parent.children[index + 1:index + 1] = attached
    tree.children[0:0] = leading
