"""
Kernel test configuration.

Shared board fixtures. Kernel tests are synchronous; the reducer and the
reorder function are pure.
"""

import pytest

from taskboard.kernel.events import make_board


@pytest.fixture
def abc_board():
    """todo = [a, b, c], everything else empty."""
    return make_board({"todo": ["a", "b", "c"]})


@pytest.fixture
def spread_board():
    """Cards in every column."""
    return make_board(
        {
            "todo": ["a", "b", "c"],
            "inprogress": ["d", "e"],
            "done": ["f"],
            "unsure": ["g", "h"],
        }
    )
