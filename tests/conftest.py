import sys
import os

import pytest

# Ensure repo root on sys.path for imports like `codejudge...`
ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), os.pardir))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

from codejudge.core.config import Settings  # noqa: E402
from judge0_fakes import FakeClock  # noqa: E402


@pytest.fixture
def settings():
    s = Settings()
    s.judge0_url = "http://judge0.test"
    s.judge0_api_key = None
    s.judge0_timeout_s = 15.0
    s.max_execution_time_ms = 5000
    s.max_memory_limit_mb = 256
    return s


@pytest.fixture
def clock():
    return FakeClock()
