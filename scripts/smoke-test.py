#!/usr/bin/env python3
"""
Smoke test for a deployed Ribaunt challenge service.

Deploy guardrail: fast, and each failure names the step and HTTP status.

Flow:
1. Health check
2. Fetch challenges (POST /api/v1/challenges)
3. Solve them locally with the blocking solver
4. Submit solutions (POST /api/v1/challenges/verify), expect success
5. Submit a tampered token, expect rejection

Usage:
    ./scripts/smoke-test.py https://staging.example.com
    ./scripts/smoke-test.py http://localhost:8000 --amount 2 --health-only
"""

import argparse
import json
import sys
import time
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Callable
from urllib.error import HTTPError, URLError
from urllib.request import Request, urlopen

from ribaunt.services.solver_service import extract_tokens, solve_challenges

DEFAULT_TIMEOUT_SECONDS = 30.0
MAX_ERROR_BODY_CHARS = 2_000


class ApiError(RuntimeError):
    def __init__(self, status_code: int, body: str):
        super().__init__(f"API error {status_code}: {body}")
        self.status_code = status_code
        self.body = body


def log(msg: str) -> None:
    """Print timestamped log message."""
    print(f"[{datetime.now().strftime('%H:%M:%S')}] {msg}", flush=True)


@dataclass
class HttpClient:
    base_url: str
    timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS

    def request_json(self, method: str, path: str, data: Any = None) -> tuple[int, Any]:
        body = json.dumps(data).encode() if data is not None else None
        request = Request(
            f"{self.base_url}{path}",
            data=body,
            headers={"Content-Type": "application/json"},
            method=method,
        )
        try:
            with urlopen(request, timeout=self.timeout_seconds) as response:
                return response.getcode(), json.loads(response.read().decode())
        except HTTPError as e:
            raw = e.read().decode("utf-8", errors="replace") if e.fp else ""
            raise ApiError(e.code, raw[:MAX_ERROR_BODY_CHARS]) from e
        except (URLError, TimeoutError) as e:
            raise RuntimeError(f"Network error: {e}") from e


@dataclass
class SmokeContext:
    client: HttpClient
    amount: int
    tokens: list[str] = field(default_factory=list)
    nonces: list[str] = field(default_factory=list)


def step_health(ctx: SmokeContext) -> None:
    _, data = ctx.client.request_json("GET", "/health")
    if data.get("status") != "healthy":
        raise RuntimeError(f"Unexpected health response: {data!r}")


def step_fetch(ctx: SmokeContext) -> None:
    status, data = ctx.client.request_json("POST", "/api/v1/challenges", {"amount": ctx.amount})
    ctx.tokens = extract_tokens(data)
    log(f"Fetched {len(ctx.tokens)} challenge(s), status={status}")


def step_solve(ctx: SmokeContext) -> None:
    start = time.time()
    solutions = solve_challenges(ctx.tokens)
    if solutions is None:
        raise RuntimeError("Server returned a token the solver could not decode")
    ctx.nonces = [solution.nonce for solution in solutions]
    log(f"Solved {len(solutions)} challenge(s) in {time.time() - start:.2f}s")


def step_verify(ctx: SmokeContext) -> None:
    _, data = ctx.client.request_json(
        "POST",
        "/api/v1/challenges/verify",
        {"tokens": ctx.tokens, "solutions": ctx.nonces},
    )
    if data.get("success") is not True:
        raise RuntimeError(f"Verification did not succeed: {data!r}")


def step_tampered(ctx: SmokeContext) -> None:
    tampered = [ctx.tokens[0] + "tampered", *ctx.tokens[1:]]
    try:
        ctx.client.request_json(
            "POST",
            "/api/v1/challenges/verify",
            {"tokens": tampered, "solutions": ctx.nonces},
        )
    except ApiError as e:
        if e.status_code == 400:
            return
        raise
    raise RuntimeError("Tampered token was accepted")


def run_steps(ctx: SmokeContext, steps: list[tuple[str, Callable[[SmokeContext], None]]]) -> bool:
    overall_start = time.time()
    for name, run in steps:
        log(f"STEP: {name}")
        start = time.time()
        try:
            run(ctx)
        except Exception as e:
            log(f"FAILED: {name}: {e}")
            return False
        log(f"OK: {name} ({time.time() - start:.2f}s)")
    log(f"Total: {time.time() - overall_start:.2f}s")
    return True


def main() -> int:
    parser = argparse.ArgumentParser(description="Ribaunt smoke test")
    parser.add_argument("base_url", help="Base URL (e.g., https://staging.example.com)")
    parser.add_argument("--amount", type=int, default=2, help="Challenges to request")
    parser.add_argument(
        "--health-only",
        action="store_true",
        help="Only run health check, skip full flow",
    )
    parser.add_argument(
        "--timeout",
        type=float,
        default=DEFAULT_TIMEOUT_SECONDS,
        help=f"HTTP timeout seconds (default: {DEFAULT_TIMEOUT_SECONDS:g})",
    )
    args = parser.parse_args()

    client = HttpClient(base_url=args.base_url.rstrip("/"), timeout_seconds=args.timeout)
    ctx = SmokeContext(client=client, amount=args.amount)

    steps = [("health", step_health)]
    if not args.health_only:
        steps.extend(
            [
                ("fetch challenges", step_fetch),
                ("solve", step_solve),
                ("verify", step_verify),
                ("tampered token rejected", step_tampered),
            ]
        )

    return 0 if run_steps(ctx, steps) else 1


if __name__ == "__main__":
    sys.exit(main())
