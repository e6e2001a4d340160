"""Exception types raised by the sharing engine.

Nothing in the engine recovers from these; they tell the driver which
precondition failed so it can abort the session or retry with fixed
inputs.
"""

from __future__ import annotations


class ShareMulError(Exception):
    """Base class for all engine errors."""


class DivisionByZero(ShareMulError, ZeroDivisionError):
    """Raised when dividing by (or inverting) the additive identity."""


class InvalidParticipants(ShareMulError, ValueError):
    """Raised when an interpolation group is malformed.

    Duplicate evaluation points, id sets that do not match, or too few
    participants for the requested threshold.
    """


class PrecursorMissing(ShareMulError, RuntimeError):
    """Raised when an operation is invoked before its prerequisite state."""


class PolynomialAlreadyGenerated(ShareMulError, RuntimeError):
    """Raised when a participant tries to replace its sharing polynomial."""
