from pydantic import BaseModel, ConfigDict, Field

from ribaunt.config import settings


class ChallengePayload(BaseModel):
    """Signed content of a challenge token."""

    # Exact wire shape: only the expiresAt key, no coercion of "5" to 5
    model_config = ConfigDict(frozen=True, strict=True)

    puzzle: str = Field(..., min_length=1)
    difficulty: int = Field(..., ge=0, description="Required leading zero hex digits")
    expires_at: int = Field(..., alias="expiresAt", description="Unix timestamp, seconds")

    def to_claims(self) -> dict:
        """Wire representation: exactly puzzle, difficulty and expiresAt."""
        return self.model_dump(by_alias=True)


class ChallengeSolution(BaseModel):
    model_config = ConfigDict(frozen=True)

    nonce: str = Field(..., min_length=1, max_length=64)
    hash: str = Field(..., min_length=64, max_length=64, pattern=r"^[a-f0-9]{64}$")


# A client may submit a bare nonce or the solution object the solver returned.
Nonce = int | str
NonceOrSolution = Nonce | ChallengeSolution


# Size bounds below are read from settings once, at import.


class ChallengeRequest(BaseModel):
    amount: int | None = Field(
        None, ge=1, le=settings.max_challenge_amount, description="Number of challenges"
    )


class ChallengeBatchResponse(BaseModel):
    challenges: list[str]
    difficulty: int
    expires_in: int
    algorithm: str = "sha256"


class VerificationRequest(BaseModel):
    tokens: list[str] = Field(..., max_length=settings.max_challenge_amount)
    solutions: list[ChallengeSolution | str | int] = Field(
        ..., max_length=settings.max_challenge_amount
    )


class VerificationResponse(BaseModel):
    success: bool
