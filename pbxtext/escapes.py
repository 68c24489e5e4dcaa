"""String escaping for old-style property lists.

Decoding follows ``getSlashedChar()`` in CoreFoundation's CFOldStylePList.c,
including the NeXTSTEP remapping of high octal escapes. Encoding only covers
what the writer must escape to stay parseable, so the two are not inverses.
"""

import re

# NeXTSTEP code points 0x80-0xFF, indexed by ``code - 0x80``.
# http://ftp.unicode.org/Public/MAPPINGS/VENDORS/NEXT/NEXTSTEP.TXT
NEXT_STEP_MAPPING = (
    0x00A0, 0x00C0, 0x00C1, 0x00C2, 0x00C3, 0x00C4, 0x00C5, 0x00C7,
    0x00C8, 0x00C9, 0x00CA, 0x00CB, 0x00CC, 0x00CD, 0x00CE, 0x00CF,
    0x00D0, 0x00D1, 0x00D2, 0x00D3, 0x00D4, 0x00D5, 0x00D6, 0x00D9,
    0x00DA, 0x00DB, 0x00DC, 0x00DD, 0x00DE, 0x00B5, 0x00D7, 0x00F7,
    0x00A9, 0x00A1, 0x00A2, 0x00A3, 0x2044, 0x00A5, 0x0192, 0x00A7,
    0x00A4, 0x2019, 0x201C, 0x00AB, 0x2039, 0x203A, 0xFB01, 0xFB02,
    0x00AE, 0x2013, 0x2020, 0x2021, 0x00B7, 0x00A6, 0x00B6, 0x2022,
    0x201A, 0x201E, 0x201D, 0x00BB, 0x2026, 0x2030, 0x00AC, 0x00BF,
    0x00B9, 0x02CB, 0x00B4, 0x02C6, 0x02DC, 0x00AF, 0x02D8, 0x02D9,
    0x00A8, 0x00B2, 0x02DA, 0x00B8, 0x00B3, 0x02DD, 0x02DB, 0x02C7,
    0x2014, 0x00B1, 0x00BC, 0x00BD, 0x00BE, 0x00E0, 0x00E1, 0x00E2,
    0x00E3, 0x00E4, 0x00E5, 0x00E7, 0x00E8, 0x00E9, 0x00EA, 0x00EB,
    0x00EC, 0x00C6, 0x00ED, 0x00AA, 0x00EE, 0x00EF, 0x00F0, 0x00F1,
    0x0141, 0x00D8, 0x0152, 0x00BA, 0x00F2, 0x00F3, 0x00F4, 0x00F5,
    0x00F6, 0x00E6, 0x00F9, 0x00FA, 0x00FB, 0x0131, 0x00FC, 0x00FD,
    0x0142, 0x00F8, 0x0153, 0x00DF, 0x00FE, 0x00FF, 0xFFFD, 0xFFFD,
)

REPLACEMENT_CHARACTER = "\ufffd"

OCTAL_DIGITS = "01234567"

UNQUOTE_MAP = {
    "a": "\a",
    "b": "\b",
    "f": "\f",
    "n": "\n",
    "r": "\r",
    "t": "\t",
    "v": "\v",
    '"': '"',
    "'": "'",
    "\\": "\\",
    "\n": "\n",
}

QUOTE_MAP = {
    "\a": "\\a",
    "\b": "\\b",
    "\f": "\\f",
    "\r": "\\r",
    "\t": "\\t",
    "\v": "\\v",
    "\n": "\\n",
    '"': '\\"',
    "\\": "\\\\",
}
for _code in [*range(0x00, 0x07), *range(0x0E, 0x20)]:
    QUOTE_MAP[chr(_code)] = "\\U%04x" % _code
del _code

_QUOTE_TABLE = str.maketrans(QUOTE_MAP)

_HEX4 = re.compile(r"[0-9a-fA-F]{4}")
_UNQUOTED = re.compile(r"[\w$/:.]+", re.ASCII)


def _octal_char(code):
    if code < 0x80:
        return chr(code)
    if code <= 0xFF:
        return chr(NEXT_STEP_MAPPING[code - 0x80])
    return REPLACEMENT_CHARACTER


def _join_surrogates(text):
    # \U escapes are UTF-16 code units; pair them up into real characters.
    if not any("\ud800" <= ch <= "\udfff" for ch in text):
        return text
    return text.encode("utf-16-le", "surrogatepass").decode("utf-16-le", "surrogatepass")


def strip_quotes(body):
    """Decode the escapes in the body of a quoted string.

    Malformed sequences never raise: a ``\\U`` without four hex digits keeps
    its backslash, and an unknown escape keeps both characters.
    """
    out = []
    i = 0
    n = len(body)
    while i < n:
        ch = body[i]
        if ch != "\\" or i + 1 >= n:
            out.append(ch)
            i += 1
            continue

        nxt = body[i + 1]
        if nxt in UNQUOTE_MAP:
            out.append(UNQUOTE_MAP[nxt])
            i += 2
        elif nxt == "U":
            digits = body[i + 2:i + 6]
            if _HEX4.fullmatch(digits):
                out.append(chr(int(digits, 16)))
                i += 6
            else:
                out.append(ch)
                i += 1
        elif nxt in OCTAL_DIGITS:
            j = i + 1
            while j < n and j < i + 4 and body[j] in OCTAL_DIGITS:
                j += 1
            out.append(_octal_char(int(body[i + 1:j], 8)))
            i = j
        else:
            out.append(ch + nxt)
            i += 2

    return _join_surrogates("".join(out))


def add_quotes(text):
    return str(text).translate(_QUOTE_TABLE)


def ensure_quotes(value):
    """Escape ``value`` and wrap it in double quotes unless it is a bare word."""
    value = add_quotes(value)
    # A bare `//...` would read back as a comment.
    if _UNQUOTED.fullmatch(value) and not value.startswith("//"):
        return value
    return f'"{value}"'
