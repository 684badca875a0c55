from __future__ import annotations

from io import StringIO

import pytest
from rich.console import Console


@pytest.fixture
def record_console() -> Console:
    """Rich console writing to memory so tests can export what was printed."""

    return Console(file=StringIO(), record=True, force_terminal=True, color_system="truecolor", width=120)
