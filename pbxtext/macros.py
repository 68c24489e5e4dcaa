"""Expansion of build-setting references such as ``$(PRODUCT_NAME:lower)``.

Ref: http://codeworkshop.net/posts/xcode-build-setting-transformations
"""

import logging
import posixpath
import re
from collections.abc import Mapping

from .errors import MacroCycleError

log = logging.getLogger(__name__)

_NOT_RFC1034 = re.compile(r"[^a-zA-Z0-9]")
_NOT_C99 = re.compile(r"[-\s]")


def resolve_build_setting(value, lookup):
    """Expand every ``$(NAME:modifier...)`` in ``value``.

    ``lookup`` is a mapping or a callable returning the raw setting for a
    name, or None. Unknown settings expand to an empty string unless a
    ``default=`` modifier supplies a value.
    """
    if isinstance(lookup, Mapping):
        lookup = lookup.get
    return _expand(value, lookup, ())


def _stringify(value):
    if value is None or isinstance(value, str):
        return value
    if isinstance(value, list):
        return " ".join(str(item) for item in value)
    return str(value)


def _expand(text, lookup, chain):
    while True:
        expanded = _expand_once(text, lookup, chain)
        if expanded == text:
            return expanded
        text = expanded


def _closing_paren(text, start):
    """Index of the ``)`` balancing the ``(`` at ``start``, or None."""
    depth = 0
    for index in range(start, len(text)):
        char = text[index]
        if char == "(":
            depth += 1
        elif char == ")":
            depth -= 1
            if depth == 0:
                return index
    return None


def _expand_once(text, lookup, chain):
    out = []
    position = 0
    while True:
        start = text.find("$(", position)
        if start < 0:
            out.append(text[position:])
            return "".join(out)
        end = _closing_paren(text, start + 1)
        if end is None:
            # Unbalanced; keep it and look for a later reference.
            out.append(text[position:start + 2])
            position = start + 2
            continue
        out.append(text[position:start])
        out.append(_resolve_reference(text[start + 2:end], lookup, chain))
        position = end + 1


def _split_modifiers(inner):
    parts = []
    depth = 0
    current = []
    for char in inner:
        if char == "(":
            depth += 1
        elif char == ")":
            depth -= 1
        if char == ":" and depth == 0:
            parts.append("".join(current))
            current = []
        else:
            current.append(char)
    parts.append("".join(current))
    return parts


def _resolve_reference(inner, lookup, chain):
    name, *modifiers = _split_modifiers(inner)
    name = _expand(name, lookup, chain)
    modifiers = [_expand(modifier, lookup, chain) for modifier in modifiers]

    if name in chain:
        raise MacroCycleError([*chain, name])

    value = _stringify(lookup(name))
    if value:
        value = _expand(value, lookup, (*chain, name))
    for modifier in modifiers:
        value = apply_modifier(modifier, value)
    log.debug("$(%s) -> %r", inner, value)
    return _expand(value or "", lookup, chain)


# ----------------------
# Modifiers
# ----------------------
def _strip_slashes(path):
    return path.rstrip("/") or path


def _file(path):
    return posixpath.basename(_strip_slashes(path))


def apply_modifier(modifier, value):
    """Apply one ``:modifier`` to a resolved setting (which may be None)."""
    if modifier == "lower":
        return value.lower() if value is not None else None
    if modifier == "upper":
        return value.upper() if value is not None else None
    if modifier == "rfc1034identifier":
        return _NOT_RFC1034.sub("-", value) if value is not None else None
    if modifier == "c99extidentifier":
        return _NOT_C99.sub("_", value) if value is not None else None
    if modifier.startswith("default="):
        return value or modifier[len("default="):]
    if not value:
        return value

    if modifier == "suffix":
        # The extension including the dot.
        return posixpath.splitext(_file(value))[1]
    if modifier == "file":
        return _file(value)
    if modifier == "dir":
        return posixpath.dirname(_strip_slashes(value)) or "."
    if modifier == "base":
        # Only the last extension goes: bar.d.ts -> bar.d
        name = _file(value)
        dot = name.rfind(".")
        return name if dot == -1 else name[:dot]
    if modifier == "standardizepath":
        return posixpath.abspath(value)
    return value
