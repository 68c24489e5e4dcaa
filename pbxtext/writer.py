"""Serialize a value tree back into Xcode's pbxproj text.

The output mirrors what Xcode itself writes, so that parsing a file and
writing it back leaves it byte-for-byte unchanged.
"""

import logging

from .comments import create_reference_list
from .escapes import ensure_quotes
from .isa import INLINE_KINDS, Isa

log = logging.getLogger(__name__)

EOL = "\n"

# May point outside this project, so never annotated with a comment.
UNCOMMENTED_KEYS = frozenset({"remoteGlobalIDString", "TestTargetID"})


def literal(value):
    """Text of a scalar before quoting."""
    if isinstance(value, bool):
        raise TypeError("Cannot write boolean values; use YES/NO strings")
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        return repr(value)
    if isinstance(value, str):
        return value
    raise TypeError(f"Cannot write value of type {type(value).__name__}")


def format_data(data):
    return f"<{data.hex()}>"


def group_by_isa(objects):
    """Objects grouped by ``isa``, groups sorted like Xcode, members in map order."""
    groups = {}
    for uuid, record in objects.items():
        groups.setdefault(record.get("isa"), []).append((uuid, record))
    return sorted(groups.items())


class Writer:
    def __init__(self, project, tab="\t", shebang="!$*UTF8*$!", skip_none=False):
        self.project = project
        self.tab = tab
        self.shebang = shebang
        self.skip_none = skip_none
        self.indent = 0
        self.chunks = []
        self.comments = create_reference_list(project)
        self.write_shebang()
        self.write_project()

    def get_results(self):
        return "".join(self.chunks)

    # ----------------------
    # Output helpers
    # ----------------------
    def pad(self):
        return self.tab * self.indent

    def println(self, text):
        self.chunks.append(self.pad() + text + EOL)

    def flush(self, text):
        self.chunks.append(text)

    def skip(self, key, value):
        if value is not None:
            return False
        if self.skip_none:
            return True
        raise TypeError(f"Cannot write None for {key!r}")

    def format_id(self, value):
        """``<uuid> /* comment */`` for known objects, a quoted literal otherwise."""
        comment = self.comments.get(value) if isinstance(value, str) else None
        if comment:
            return f"{value} /* {comment} */"
        return ensure_quotes(literal(value))

    def format_scalar(self, key, value):
        if isinstance(value, (int, float)) or key in UNCOMMENTED_KEYS:
            return ensure_quotes(literal(value))
        return self.format_id(value)

    # ----------------------
    # Document
    # ----------------------
    def write_shebang(self):
        self.println(f"// {self.shebang}")

    def write_project(self):
        if isinstance(self.project, list):
            self.println("(")
            self.indent += 1
            self.write_items(self.project)
            self.indent -= 1
            self.println(")")
            return

        self.println("{")
        self.indent += 1
        self.write_object(self.project, is_base=True)
        self.indent -= 1
        self.println("}")

    def write_object(self, obj, is_base=False):
        """Write the items of ``obj``; ``is_base`` is true outside the objects section."""
        for key, value in obj.items():
            if self.skip(key, value):
                continue
            name = ensure_quotes(key)
            if isinstance(value, bytes):
                self.println(f"{name} = {format_data(value)};")
            elif isinstance(value, list):
                self.write_array(name, value)
            elif isinstance(value, dict):
                # Empty objects are inlined inside the objects section; Xcode keeps `classes = {\n};` open.
                if not value and not is_base:
                    self.println(f"{name} = {{}};")
                    continue
                self.println(f"{name} = {{")
                self.indent += 1
                if is_base and key == "objects":
                    self.write_pbx_objects(value)
                else:
                    self.write_object(value, is_base=is_base)
                self.indent -= 1
                self.println("};")
            else:
                self.println(f"{name} = {self.format_scalar(key, value)};")

    def write_array(self, name, items):
        self.println(f"{name} = (")
        self.indent += 1
        self.write_items(items)
        self.indent -= 1
        self.println(");")

    def write_items(self, items):
        for item in items:
            if self.skip(None, item):
                continue
            if isinstance(item, bytes):
                self.println(format_data(item) + ",")
            elif isinstance(item, dict):
                self.println("{")
                self.indent += 1
                self.write_object(item)
                self.indent -= 1
                self.println("},")
            elif isinstance(item, list):
                self.println("(")
                self.indent += 1
                self.write_items(item)
                self.indent -= 1
                self.println("),")
            else:
                self.println(self.format_id(item) + ",")

    # ----------------------
    # objects = { ... }
    # ----------------------
    def write_pbx_objects(self, objects):
        for isa, members in group_by_isa(objects):
            self.flush(EOL)
            self.flush(f"/* Begin {isa} section */" + EOL)
            for uuid, record in members:
                self.write_record(uuid, record)
            self.flush(f"/* End {isa} section */" + EOL)

    def write_record(self, uuid, record):
        if Isa.of(record.get("isa")) in INLINE_KINDS:
            parts = []
            self.build_inline(uuid, record, parts)
            self.println("".join(parts).strip())
            return

        self.println(self.format_id(uuid) + " = {")
        self.indent += 1
        self.write_object(record)
        self.indent -= 1
        self.println("};")

    def build_inline(self, key, record, parts):
        parts.append(self.format_id(key) + " = {")
        for name, value in record.items():
            if self.skip(name, value):
                continue
            if isinstance(value, bytes):
                parts.append(f"{ensure_quotes(name)} = {format_data(value)}; ")
            elif isinstance(value, list):
                parts.append(f"{ensure_quotes(name)} = (")
                for item in value:
                    if self.skip(name, item):
                        continue
                    text = format_data(item) if isinstance(item, bytes) else ensure_quotes(literal(item))
                    parts.append(text + ", ")
                parts.append("); ")
            elif isinstance(value, dict):
                self.build_inline(name, value, parts)
            else:
                parts.append(f"{ensure_quotes(name)} = {self.format_scalar(name, value)}; ")
        parts.append("}; ")


def build(project, **options):
    """Return ``project`` as pbxproj text.

    Options: ``tab`` (indent unit), ``shebang`` (first-line marker) and
    ``skip_none`` (drop None values instead of failing).
    """
    text = Writer(project, **options).get_results()
    log.debug("wrote %d characters", len(text))
    return text
