class ExtractionError(RuntimeError):
    """The receipt extraction service failed or returned an unusable payload."""


class CommandError(RuntimeError):
    """The command interpretation service failed or returned an unusable payload."""


class ShareDecodeError(ValueError):
    """A share token could not be decoded into a shared receipt."""
