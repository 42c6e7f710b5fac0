"""
Error taxonomy for the challenge lifecycle.

Only InvalidArgument, ChallengeSolveError and ConfigurationError ever reach
callers of the public API. The others are raised internally and collapse to
``None`` (solving) or ``False`` (verification) at the public boundary.
"""


class RibauntError(Exception):
    """Base class for all challenge errors."""


class ConfigurationError(RibauntError):
    """The signing secret is missing or unusable."""


class InvalidArgument(RibauntError, ValueError):
    """Malformed issuance parameters."""


class MalformedToken(RibauntError):
    """A token could not be decoded into a challenge payload."""


class AuthenticationFailure(RibauntError):
    """Signature mismatch, wrong secret, expired or structurally invalid token."""


class BatchShapeMismatch(RibauntError):
    """Token and nonce sequences differ in length."""


class ChallengeSolveError(RibauntError):
    """A token in a cooperative batch could not be solved."""

    def __init__(self, index: int, message: str):
        super().__init__(message)
        self.index = index
