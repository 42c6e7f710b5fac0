import structlog
from fastapi import APIRouter, Depends, HTTPException, Request

from ribaunt.config import settings
from ribaunt.middleware.rate_limit import limiter
from ribaunt.schemas.challenge import (
    ChallengeBatchResponse,
    ChallengeRequest,
    VerificationRequest,
    VerificationResponse,
)
from ribaunt.services.challenge_service import ChallengeEngine, get_engine

router = APIRouter()
logger = structlog.get_logger()


def _issue(engine: ChallengeEngine, amount: int) -> ChallengeBatchResponse:
    try:
        tokens = engine.create_challenges(
            difficulty=settings.default_difficulty,
            amount=amount,
            ttl_seconds=settings.challenge_ttl_seconds,
        )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    return ChallengeBatchResponse(
        challenges=tokens,
        difficulty=settings.default_difficulty,
        expires_in=settings.challenge_ttl_seconds,
    )


@router.get("/challenges", response_model=ChallengeBatchResponse)
@limiter.limit(settings.rate_limit_challenges)
async def get_challenges(
    request: Request,
    engine: ChallengeEngine = Depends(get_engine),
):
    """Issue the default number of challenges, for widgets that fetch with a plain GET."""
    return _issue(engine, settings.default_amount)


@router.post("/challenges", response_model=ChallengeBatchResponse, status_code=201)
@limiter.limit(settings.rate_limit_challenges)
async def create_challenges(
    request: Request,
    challenge_request: ChallengeRequest | None = None,
    engine: ChallengeEngine = Depends(get_engine),
):
    """
    Issue a batch of proof-of-work challenges.

    Difficulty and lifetime are set by the operator; clients may only ask
    for how many challenges they get.
    """
    amount = settings.default_amount
    if challenge_request is not None and challenge_request.amount is not None:
        amount = challenge_request.amount

    return _issue(engine, amount)


@router.post("/challenges/verify", response_model=VerificationResponse)
@limiter.limit(settings.rate_limit_verify)
async def verify_challenges(
    request: Request,
    verification: VerificationRequest,
    engine: ChallengeEngine = Depends(get_engine),
):
    """
    Check solved challenges.

    All tokens must verify; the response does not say which check failed.
    """
    if not verification.tokens or not engine.verify_solutions(
        verification.tokens, verification.solutions
    ):
        logger.info("verification_rejected", count=len(verification.tokens))
        raise HTTPException(status_code=400, detail="Invalid proof of work")

    logger.info("verification_accepted", count=len(verification.tokens))
    return VerificationResponse(success=True)
