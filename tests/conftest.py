from __future__ import annotations

import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
for entry in (SRC, ROOT):
    if str(entry) not in sys.path:
        sys.path.insert(0, str(entry))

from response_results.config import ResultMappingConfig  # noqa: E402
from tests.shared.notifier import RecordingNotifier  # noqa: E402


@pytest.fixture
def mapping_config() -> ResultMappingConfig:
    return ResultMappingConfig(
        data_key="data",
        code_key="code",
        message_key="message",
        success_code=200,
    )


@pytest.fixture
def notifier() -> RecordingNotifier:
    return RecordingNotifier()
