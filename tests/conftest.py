"""
Name: Pytest Configuration and Shared Fixtures

Responsibilities:
  - Configure a deterministic test environment (no .env, demo provider, no retry delays)
  - Provide transformer doubles for the orchestrator and endpoint tests

Notes:
  - Environment variables are set BEFORE importing textproc (settings are cached
    and read at import time by schemas/main).
"""

import os
import sys
from pathlib import Path
from typing import Callable, Iterable, Optional

import pytest

ROOT_DIR = Path(__file__).resolve().parents[1]
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))

os.environ.setdefault("APP_ENV", "test")
os.environ.setdefault("AI_PROVIDER", "demo")
os.environ.setdefault("LOG_JSON", "false")
os.environ.setdefault("RETRY_BASE_DELAY_SECONDS", "0")
os.environ.setdefault("RETRY_MAX_DELAY_SECONDS", "0.01")

from textproc.crosscutting import config as app_config  # noqa: E402

app_config.Settings.model_config["env_file"] = None

from textproc.domain.entities import Operation, TransformOptions  # noqa: E402


def pytest_configure(config) -> None:
    config.addinivalue_line(
        "markers", "unit: Unit tests (fast, no external dependencies)"
    )


class RecordingTransformer:
    """
    R: Transformer double: upper-cases each segment and records the calls.

    `fail_on` holds 1-based call numbers that raise instead of returning.
    `on_call` runs before each transform (e.g. to cancel the session).
    """

    def __init__(
        self,
        fail_on: Iterable[int] = (),
        on_call: Optional[Callable[[int, str], None]] = None,
    ) -> None:
        self.fail_on = set(fail_on)
        self.on_call = on_call
        self.calls: list[tuple[str, Operation, TransformOptions]] = []

    def transform(self, text: str, operation: Operation, options: TransformOptions) -> str:
        self.calls.append((text, operation, options))
        call_number = len(self.calls)
        if self.on_call is not None:
            self.on_call(call_number, text)
        if call_number in self.fail_on:
            raise RuntimeError(f"provider down #{call_number}")
        return text.upper()


@pytest.fixture
def recording_transformer() -> RecordingTransformer:
    return RecordingTransformer()


@pytest.fixture
def make_transformer() -> Callable[..., RecordingTransformer]:
    return RecordingTransformer
