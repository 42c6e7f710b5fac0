from ribaunt.schemas.challenge import (
    ChallengeBatchResponse,
    ChallengePayload,
    ChallengeRequest,
    ChallengeSolution,
    Nonce,
    NonceOrSolution,
    VerificationRequest,
    VerificationResponse,
)

__all__ = [
    "ChallengeBatchResponse",
    "ChallengePayload",
    "ChallengeRequest",
    "ChallengeSolution",
    "Nonce",
    "NonceOrSolution",
    "VerificationRequest",
    "VerificationResponse",
]
