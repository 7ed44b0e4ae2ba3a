"""Exception types raised by the emblem engine.

All of them derive from :class:`EmblemError`; the argument and decode errors
are also ``ValueError`` so callers that only know the builtin still catch them.
"""


class EmblemError(Exception):
    """Base class for emblem engine failures."""


class InvalidArgument(EmblemError, ValueError):
    """A caller supplied an argument outside its domain (size, hex, params)."""


class DecodeError(EmblemError, ValueError):
    """A design code could not be turned back into a design."""


class ResolutionUnavailable(EmblemError, LookupError):
    """The external color source returned nothing usable for a color ref."""
