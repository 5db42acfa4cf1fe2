import sys
from pathlib import Path

import pytest


# Ensure tests can import project packages regardless of how pytest is invoked.
ROOT = Path(__file__).resolve().parents[1]
ROOT_STR = str(ROOT)
if ROOT_STR not in sys.path:
    sys.path.insert(0, ROOT_STR)

# Helper modules (fakes.py) live beside the tests.
TESTS_STR = str(Path(__file__).resolve().parent)
if TESTS_STR not in sys.path:
    sys.path.insert(0, TESTS_STR)


@pytest.fixture
def upstream_error():
    from engine.errors import UpstreamError

    return UpstreamError("Error 500 on search", provider="test", endpoint="search", status_code=500)
