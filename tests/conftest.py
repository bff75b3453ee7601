import sys
from pathlib import Path

import pytest

REPO = Path(__file__).resolve().parents[1]

# Class file builders live with the blob generator script.
sys.path.insert(0, str(REPO / "tools"))


@pytest.fixture
def repo() -> Path:
    return REPO
