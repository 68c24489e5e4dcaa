class PbxprojError(Exception):
    """Base class for everything raised by pbxtext."""


class _PositionedError(PbxprojError):
    def __init__(self, message, line=None, column=None):
        super().__init__(message)
        self.message = message
        self.line = line
        self.column = column


class LexError(_PositionedError):
    """The input contains text that is not a token."""

    def __str__(self):
        return f"Parsing errors: {self.message}"


class ParseError(_PositionedError):
    """The token stream does not follow the grammar."""

    def __str__(self):
        return self.message


class ConsistencyError(PbxprojError):
    """An object in the graph cannot be given a comment."""

    def __init__(self, uuid, isa, reason=None):
        message = f"Failed to find comment reference for ID: {uuid}, isa: {isa}"
        if reason:
            message += f" ({reason})"
        super().__init__(message)
        self.uuid = uuid
        self.isa = isa


class MacroCycleError(PbxprojError):
    """A build setting refers back to itself while being expanded."""

    def __init__(self, chain):
        self.chain = tuple(chain)
        super().__init__("Build setting cycle: " + " -> ".join(self.chain))
