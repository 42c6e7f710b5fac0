import time
from collections.abc import Callable

import jwt
from pydantic import ValidationError

from ribaunt.exceptions import AuthenticationFailure, ConfigurationError, MalformedToken
from ribaunt.schemas.challenge import ChallengePayload

DEFAULT_ALGORITHM = "HS256"

Clock = Callable[[], float]


class ChallengeTokenCodec:
    """
    Signs challenge payloads into JWTs and verifies them.

    The secret is held privately; callers only ever see tokens.
    """

    def __init__(
        self,
        secret: str,
        algorithm: str = DEFAULT_ALGORITHM,
        clock: Clock = time.time,
    ) -> None:
        if not secret:
            raise ConfigurationError("Signing secret is not set")
        self._secret = secret
        self._algorithm = algorithm
        self._clock = clock

    @property
    def algorithm(self) -> str:
        return self._algorithm

    def now(self) -> int:
        """Current Unix time in whole seconds, from the injected clock."""
        return int(self._clock())

    def sign(self, payload: ChallengePayload) -> str:
        return jwt.encode(payload.to_claims(), self._secret, algorithm=self._algorithm)

    def verify(self, token: str) -> ChallengePayload:
        """
        Check signature, shape and expiry of a token.

        Raises AuthenticationFailure on any problem. A token is still valid
        during the second named by expiresAt.
        """
        try:
            claims = jwt.decode(token, self._secret, algorithms=[self._algorithm])
            payload = ChallengePayload.model_validate(claims)
        except (jwt.InvalidTokenError, ValidationError) as e:
            raise AuthenticationFailure("Challenge token rejected") from e

        if payload.expires_at < self.now():
            raise AuthenticationFailure("Challenge token expired")

        return payload


def read_payload(token: str) -> ChallengePayload:
    """Parse a token's payload without checking its signature."""
    try:
        claims = jwt.decode(token, options={"verify_signature": False})
        return ChallengePayload.model_validate(claims)
    except (jwt.InvalidTokenError, ValidationError) as e:
        raise MalformedToken("Could not decode challenge token") from e


def decode_payload(token: str) -> ChallengePayload | None:
    """
    Soft-failing variant of read_payload, for solvers.

    The result is untrusted; only ChallengeTokenCodec.verify establishes trust.
    """
    try:
        return read_payload(token)
    except MalformedToken:
        return None
