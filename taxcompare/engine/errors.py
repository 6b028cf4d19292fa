"""
errors.py — engine exception types.

Bad user numbers are never an error here (they are coerced to 0). Only
configuration — slab tables and regime definitions — can be rejected.
"""


class RegimeConfigError(ValueError):
    """A slab table or RegimeConfig violates its structural invariants."""


class UnknownRegimeError(LookupError):
    """No regime is registered for the requested financial year / name."""


__all__ = ["RegimeConfigError", "UnknownRegimeError"]
