"""Build/runtime diagnostics."""


def is_release_build() -> bool:
    """True when the interpreter runs with assertions disabled (``python -O``)."""
    return not __debug__
