import sys
from pathlib import Path
from typing import Iterator

import pytest

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))
if SRC.exists():
    sys.path.insert(0, str(SRC))

# Register shared Hypothesis profiles for deterministic CI runs and fast local loops.
from tests.util import hypothesis_profiles  # noqa: E402,F401  pylint: disable=unused-import

from ordmap.core.ordered_map import invariant_checks_enabled, set_invariant_checks  # noqa: E402


@pytest.fixture(autouse=True)
def _invariant_checks() -> Iterator[None]:
    """Run every test with representation checks on, then restore the flag."""

    previous = invariant_checks_enabled()
    set_invariant_checks(True)
    yield
    set_invariant_checks(previous)
