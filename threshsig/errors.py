"""
Error Taxonomy
Every failure the scheme reports synchronously to its caller.

Parameter problems are rejected before any heavy computation starts.
A combined signature that fails to verify is NOT an error here: the
combiner never inspects individual shares, so a bad share only shows
up when the final signature is checked against the group key.
"""

from typing import Optional

__all__ = [
    "ThreshSigError",
    "InvalidParameterError",
    "KeyGenerationError",
    "InsufficientSharesError",
    "InvalidIndexError",
    "MalformedShareError",
    "DealerStateError",
]


class ThreshSigError(Exception):
    """Base class for all threshold signature errors."""

    def __init__(self, code: str, message: str, context: Optional[str] = None):
        self.code = code
        self.message = message
        self.context = context

        full_msg = f"[{code}] {message}"
        if context:
            full_msg += f" Context: {context}"

        super().__init__(full_msg)


class InvalidParameterError(ThreshSigError, ValueError):
    def __init__(self, context: Optional[str] = None):
        super().__init__("THRESHSIG_E001", "Invalid scheme parameter.", context)


class KeyGenerationError(ThreshSigError):
    def __init__(self, context: Optional[str] = None):
        super().__init__("THRESHSIG_E002", "Safe prime search exceeded its attempt budget.", context)


class InsufficientSharesError(ThreshSigError):
    def __init__(self, context: Optional[str] = None):
        super().__init__("THRESHSIG_E101", "Not enough signature shares to reach the threshold.", context)


class InvalidIndexError(ThreshSigError):
    def __init__(self, context: Optional[str] = None):
        super().__init__("THRESHSIG_E102", "Share index is out of range or duplicated.", context)


class MalformedShareError(ThreshSigError, ValueError):
    def __init__(self, context: Optional[str] = None):
        super().__init__("THRESHSIG_E200", "Serialized key share is structurally invalid.", context)


class DealerStateError(ThreshSigError, RuntimeError):
    def __init__(self, context: Optional[str] = None):
        super().__init__("THRESHSIG_E300", "Dealer has no key material available.", context)
