"""
Client-side solvers for challenge tokens.

Solvers never verify signatures: they only need the puzzle and difficulty,
and the server re-checks everything on verification. No secret is required.

Two variants share one algorithm:
- solve_challenge / solve_challenges block until done (servers, tests, scripts)
- solve_challenge_async / solve_challenges_async yield to the event loop every
  YIELD_EVERY attempts so an interactive host stays responsive
"""

import math
from collections.abc import Callable, Sequence

import structlog

from ribaunt.exceptions import ChallengeSolveError
from ribaunt.schemas.challenge import ChallengeSolution
from ribaunt.services.pow_service import YIELD_EVERY, find_nonce, find_nonce_async
from ribaunt.services.token_service import decode_payload

ProgressCallback = Callable[[int], None]

logger = structlog.get_logger()


def progress_percent(completed: int, total: int) -> int:
    """Integer percentage, rounding halves up."""
    return math.floor(100 * completed / total + 0.5)


def extract_tokens(body) -> list[str]:
    """
    Pull challenge tokens out of a challenge-fetch response body.

    Accepts {"challenges": [...]}, {"tokens": [...]} or a bare list.
    """
    if isinstance(body, dict):
        body = body.get("challenges", body.get("tokens"))
    if not isinstance(body, list) or not all(isinstance(t, str) for t in body):
        raise ValueError("Response does not contain a list of challenge tokens")
    return body


def solve_challenge(token: str) -> ChallengeSolution | None:
    """
    Solve a single challenge token.

    Returns None if the token cannot be decoded. Otherwise never gives up.
    """
    payload = decode_payload(token)
    if payload is None:
        return None

    nonce, digest = find_nonce(payload.puzzle, payload.difficulty)
    return ChallengeSolution(nonce=str(nonce), hash=digest)


def solve_challenges(tokens: Sequence[str]) -> list[ChallengeSolution] | None:
    """
    Solve tokens in order. All-or-nothing: None if any token fails to decode.
    """
    solutions = []
    for token in tokens:
        solution = solve_challenge(token)
        if solution is None:
            return None
        solutions.append(solution)
    return solutions


async def solve_challenge_async(
    token: str, yield_every: int = YIELD_EVERY
) -> ChallengeSolution | None:
    payload = decode_payload(token)
    if payload is None:
        return None

    nonce, digest = await find_nonce_async(
        payload.puzzle, payload.difficulty, yield_every=yield_every
    )
    return ChallengeSolution(nonce=str(nonce), hash=digest)


async def solve_challenges_async(
    tokens: Sequence[str],
    on_progress: ProgressCallback | None = None,
    yield_every: int = YIELD_EVERY,
) -> list[ChallengeSolution]:
    """
    Solve tokens one after another without blocking the event loop.

    Args:
        tokens: Challenge tokens, solved strictly in order
        on_progress: Called with an integer percentage after each token
        yield_every: Attempts between yields to the event loop

    Raises:
        ChallengeSolveError: naming the index of the first token that is
            empty or cannot be decoded
    """
    solutions = []
    total = len(tokens)

    for index, token in enumerate(tokens):
        if not token:
            raise ChallengeSolveError(index, f"Invalid token at index {index}")

        solution = await solve_challenge_async(token, yield_every=yield_every)
        if solution is None:
            logger.warning("challenge_solve_failed", index=index, total=total)
            raise ChallengeSolveError(index, f"Failed to solve challenge {index + 1}")

        solutions.append(solution)

        if on_progress is not None:
            on_progress(progress_percent(index + 1, total))

    return solutions
