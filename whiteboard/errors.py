"""Exception types raised by the whiteboard package."""


class WhiteboardError(Exception):
    """Base class for whiteboard errors."""


class SchemaError(WhiteboardError):
    """Raised when a drawing payload does not match the instruction schema."""


class GenerationError(WhiteboardError):
    """Raised when the generation service cannot produce instructions.

    The message is shown to the user as-is.
    """
