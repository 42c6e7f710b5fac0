import asyncio
import hashlib
import secrets

PUZZLE_LENGTH = 8

# Attempts between voluntary yields in the cooperative search
YIELD_EVERY = 1000


def generate_puzzle(length: int = PUZZLE_LENGTH) -> str:
    """Generate a random printable puzzle string (URL-safe base64 alphabet)."""
    # token_urlsafe(n) always returns more than n characters
    return secrets.token_urlsafe(length)[:length]


def compute_hash(puzzle: str, nonce: int | str) -> str:
    """
    Hash a puzzle/nonce pair.

    Format: sha256(puzzle || nonce), nonce rendered in base 10, no separator.
    Returns the lowercase hex digest.
    """
    preimage = f"{puzzle}{nonce}"
    return hashlib.sha256(preimage.encode()).hexdigest()


def meets_difficulty(digest: str, difficulty: int) -> bool:
    """Check that a hex digest has at least `difficulty` leading zeros."""
    return digest.startswith("0" * difficulty)


def find_nonce(puzzle: str, difficulty: int) -> tuple[int, str]:
    """
    Brute-force the smallest nonce satisfying `difficulty`.

    Blocks until a solution is found; expected work is 16**difficulty hashes.
    Returns (nonce, digest).
    """
    nonce = 0
    while True:
        digest = compute_hash(puzzle, nonce)
        if meets_difficulty(digest, difficulty):
            return nonce, digest
        nonce += 1


async def _yield_control() -> None:
    await asyncio.sleep(0)


async def find_nonce_async(
    puzzle: str, difficulty: int, yield_every: int = YIELD_EVERY
) -> tuple[int, str]:
    """
    Same search as find_nonce, suspending every `yield_every` attempts.

    Cancelling the awaiting task is the only way to stop the search early.
    """
    if yield_every < 1:
        raise ValueError("yield_every must be at least 1")

    nonce = 0
    while True:
        digest = compute_hash(puzzle, nonce)
        if meets_difficulty(digest, difficulty):
            return nonce, digest
        nonce += 1

        if nonce % yield_every == 0:
            await _yield_control()
