"""Error types raised at the conversion entry point.

All three subclass ``ValueError`` so callers that only care about "bad
input" can catch one type.
"""


class DecodeError(ValueError):
    """Input buffer is not a valid v1experimental ``ProfilesData`` document."""


class ConversionError(ValueError):
    """A profile references a local string or attribute that does not exist."""


class EncodeError(ValueError):
    """Converted batch could not be serialized."""
