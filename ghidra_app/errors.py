"""Base exception for every fatal condition raised while building a bundle."""


class GhidraAppError(RuntimeError):
    """Root of the ghidra_app error hierarchy.

    Library code raises subclasses of this; the CLI catches it, prints
    the message and exits non-zero. Nothing is retried.
    """
