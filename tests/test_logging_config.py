"""Tests for the structlog setup applied to service loggers."""

import json
import os
import subprocess
import sys
from pathlib import Path

from tests.test_utils import TEST_SECRET

ROOT = Path(__file__).resolve().parent.parent

# Services are imported before main.py configures structlog
SERVICE_EVENTS = """
import ribaunt.main
from ribaunt.services.challenge_service import get_engine

engine = get_engine()
engine.create_challenges(difficulty=0, amount=1)
engine.verify_solution("not-a-valid-token", "0")
"""


def run_with_env(**env) -> list[str]:
    result = subprocess.run(
        [sys.executable, "-c", SERVICE_EVENTS],
        cwd=ROOT,
        env={
            **os.environ,
            "PYTHONPATH": str(ROOT),
            "RIBAUNT_SECRET": TEST_SECRET,
            **env,
        },
        capture_output=True,
        text=True,
        check=True,
    )
    return [line for line in result.stdout.splitlines() if line.strip()]


class TestServiceLogging:
    def test_json_format_applies_to_service_events(self):
        lines = run_with_env(RIBAUNT_LOG_FORMAT="json", RIBAUNT_LOG_LEVEL="INFO")

        records = [json.loads(line) for line in lines]
        issued = [r for r in records if r["event"] == "challenges_issued"]
        assert len(issued) == 1
        assert issued[0]["level"] == "info"
        assert issued[0]["amount"] == 1

    def test_log_level_filters_debug_events(self):
        lines = run_with_env(RIBAUNT_LOG_FORMAT="json", RIBAUNT_LOG_LEVEL="INFO")
        events = [json.loads(line)["event"] for line in lines]
        assert "challenge_verification_failed" not in events

    def test_debug_level_shows_verification_failures(self):
        lines = run_with_env(RIBAUNT_LOG_FORMAT="json", RIBAUNT_LOG_LEVEL="DEBUG")
        # stdlib loggers may also speak at DEBUG
        events = [json.loads(line)["event"] for line in lines if line.startswith("{")]
        assert "challenge_verification_failed" in events

    def test_tokens_are_not_logged(self):
        lines = run_with_env(RIBAUNT_LOG_FORMAT="json", RIBAUNT_LOG_LEVEL="DEBUG")
        assert not any("not-a-valid-token" in line for line in lines)
