"""Signed, time-limited proof-of-work challenges."""

from ribaunt.exceptions import (
    AuthenticationFailure,
    BatchShapeMismatch,
    ChallengeSolveError,
    ConfigurationError,
    InvalidArgument,
    MalformedToken,
    RibauntError,
)
from ribaunt.schemas.challenge import ChallengePayload, ChallengeSolution
from ribaunt.services.challenge_service import (
    ChallengeEngine,
    create_challenge,
    get_engine,
    verify_solution,
    verify_solutions,
)
from ribaunt.services.solver_service import (
    solve_challenge,
    solve_challenge_async,
    solve_challenges,
    solve_challenges_async,
)

__all__ = [
    "AuthenticationFailure",
    "BatchShapeMismatch",
    "ChallengeEngine",
    "ChallengePayload",
    "ChallengeSolution",
    "ChallengeSolveError",
    "ConfigurationError",
    "InvalidArgument",
    "MalformedToken",
    "RibauntError",
    "create_challenge",
    "get_engine",
    "solve_challenge",
    "solve_challenge_async",
    "solve_challenges",
    "solve_challenges_async",
    "verify_solution",
    "verify_solutions",
]
