"""Shared test utilities."""

import base64
import json

TEST_SECRET = "test-signing-secret-with-enough-bytes-for-hs256"


class FakeClock:
    """Callable clock returning a settable Unix time."""

    def __init__(self, now: float):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


def token_claims(token: str) -> dict:
    """Decode a token's payload section by hand, without any JWT library."""
    payload_b64 = token.split(".")[1]
    padded = payload_b64 + "=" * (-len(payload_b64) % 4)
    return json.loads(base64.urlsafe_b64decode(padded))


def flip_signature_char(token: str) -> str:
    """Change one character in the middle of the signature section."""
    header, payload, signature = token.split(".")
    index = len(signature) // 2
    replacement = "A" if signature[index] != "A" else "B"
    return f"{header}.{payload}.{signature[:index]}{replacement}{signature[index + 1:]}"
