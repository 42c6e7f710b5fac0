import math
import numbers
import time
from collections.abc import Sequence
from functools import lru_cache

import structlog

from ribaunt.config import settings
from ribaunt.exceptions import (
    AuthenticationFailure,
    BatchShapeMismatch,
    ConfigurationError,
    InvalidArgument,
)
from ribaunt.schemas.challenge import ChallengePayload, ChallengeSolution, NonceOrSolution
from ribaunt.services.pow_service import compute_hash, generate_puzzle, meets_difficulty
from ribaunt.services.token_service import DEFAULT_ALGORITHM, ChallengeTokenCodec, Clock

logger = structlog.get_logger()


def normalize_amount(amount) -> int:
    """Floor `amount` to an int, rejecting non-finite values and anything below 1."""
    if isinstance(amount, bool) or not isinstance(amount, numbers.Real):
        raise InvalidArgument("Challenge amount must be a finite number")
    if not math.isfinite(amount):
        raise InvalidArgument("Challenge amount must be a finite number")

    normalized = math.floor(amount)
    if normalized < 1:
        raise InvalidArgument("Challenge amount must be at least 1")
    return normalized


def _check_difficulty(difficulty) -> int:
    if isinstance(difficulty, bool) or not isinstance(difficulty, numbers.Integral):
        raise InvalidArgument("Difficulty must be an integer")
    if difficulty < 0:
        raise InvalidArgument("Difficulty must not be negative")
    return int(difficulty)


def _check_batch_shape(tokens: Sequence[str], nonces: Sequence) -> None:
    if isinstance(nonces, (str, bytes)):
        raise BatchShapeMismatch("Nonces must be a sequence, not a single value")
    if len(tokens) != len(nonces):
        raise BatchShapeMismatch(f"Expected {len(tokens)} nonces, got {len(nonces)}")


def _nonce_value(nonce: NonceOrSolution | None) -> str | None:
    if isinstance(nonce, ChallengeSolution):
        return nonce.nonce
    if nonce is None:
        return None
    return str(nonce)


class ChallengeEngine:
    """
    Issues challenge tokens and verifies solutions against them.

    Each engine is its own signing domain: tokens issued by one engine only
    verify on engines holding the same secret.
    """

    def __init__(
        self,
        secret: str,
        algorithm: str = DEFAULT_ALGORITHM,
        clock: Clock = time.time,
    ) -> None:
        self._codec = ChallengeTokenCodec(secret, algorithm=algorithm, clock=clock)

    def _create_single(self, difficulty: int, ttl_seconds: int) -> str:
        payload = ChallengePayload(
            puzzle=generate_puzzle(),
            difficulty=difficulty,
            expiresAt=self._codec.now() + ttl_seconds,
        )
        return self._codec.sign(payload)

    def create_challenges(
        self,
        difficulty: int | None = None,
        amount: float | None = None,
        ttl_seconds: int | None = None,
    ) -> list[str]:
        """
        Create one or more PoW challenges as signed tokens.

        Arguments left as None take the configured defaults
        (RIBAUNT_DEFAULT_DIFFICULTY, RIBAUNT_DEFAULT_AMOUNT,
        RIBAUNT_CHALLENGE_TTL_SECONDS).

        Args:
            difficulty: Number of leading zero hex digits required in the hash
            amount: Number of challenges; floored, must be at least 1
            ttl_seconds: Lifetime of each challenge in whole seconds

        Returns:
            `amount` independently generated tokens, in creation order

        Raises:
            InvalidArgument: if difficulty or amount is unusable
        """
        if difficulty is None:
            difficulty = settings.default_difficulty
        if amount is None:
            amount = settings.default_amount
        if ttl_seconds is None:
            ttl_seconds = settings.challenge_ttl_seconds

        count = normalize_amount(amount)
        difficulty = _check_difficulty(difficulty)
        ttl_seconds = int(ttl_seconds)

        tokens = [self._create_single(difficulty, ttl_seconds) for _ in range(count)]

        logger.info(
            "challenges_issued",
            amount=count,
            difficulty=difficulty,
            ttl_seconds=ttl_seconds,
            algorithm=self._codec.algorithm,
        )
        return tokens

    def _verify_single(self, token: str, nonce: str) -> bool:
        # Trust only what the signature covers; never the client's claimed hash
        payload = self._codec.verify(token)
        digest = compute_hash(payload.puzzle, nonce)
        return meets_difficulty(digest, payload.difficulty)

    def verify_solution(self, token: str, nonce: NonceOrSolution | None) -> bool:
        """
        Verify one solution against the token it was issued with.

        Every failure (missing nonce, bad signature, expired token, wrong nonce)
        returns False; nothing is raised.
        """
        try:
            value = _nonce_value(nonce)
            if value is None:
                return False
            return self._verify_single(token, value)
        except (AuthenticationFailure, ValueError) as e:
            logger.debug("challenge_verification_failed", reason=str(e))
            return False

    def verify_solutions(
        self, tokens: Sequence[str], nonces: Sequence[NonceOrSolution | None]
    ) -> bool:
        """
        Verify a batch: True only if every position verifies.

        Mismatched lengths reject before any token is looked at.
        """
        try:
            _check_batch_shape(tokens, nonces)
        except BatchShapeMismatch as e:
            logger.debug("challenge_verification_failed", reason=str(e))
            return False

        return all(
            self.verify_solution(token, nonce) for token, nonce in zip(tokens, nonces)
        )


@lru_cache
def get_engine() -> ChallengeEngine:
    """
    Process-wide engine built from settings.

    Raises ConfigurationError when RIBAUNT_SECRET is not set.
    """
    if not settings.secret:
        raise ConfigurationError("RIBAUNT_SECRET environment variable is not set!")
    return ChallengeEngine(settings.secret, algorithm=settings.jwt_algorithm)


def create_challenge(
    difficulty: int | None = None,
    amount: float | None = None,
    ttl_seconds: int | None = None,
) -> list[str]:
    """Create challenges with the process-wide engine."""
    return get_engine().create_challenges(difficulty, amount, ttl_seconds)


def verify_solution(token: str, nonce: NonceOrSolution | None) -> bool:
    return get_engine().verify_solution(token, nonce)


def verify_solutions(
    tokens: Sequence[str], nonces: Sequence[NonceOrSolution | None]
) -> bool:
    return get_engine().verify_solutions(tokens, nonces)
