#
# Pytest Fixtures
#

# Third-party ----------------------------------------------------------------------------------------------------------
import pytest

# Local ----------------------------------------------------------------------------------------------------------------
from vinspect.inspector import InspectContext, InspectOptions

# Fixtures -------------------------------------------------------------------------------------------------------------

class Point:
    """Instance with two public and one private attribute."""

    def __init__(self, x=1, y=2):
        self.x = x
        self.y = y
        self._secret = "hidden"

    @property
    def norm(self):
        return abs(self.x) + abs(self.y)


@pytest.fixture
def point():
    return Point()


@pytest.fixture
def cyclic():
    """Dict containing itself under key 'self'."""
    value = {"name": "root"}
    value["self"] = value
    return value


@pytest.fixture
def ctx():
    """Fresh inspection context with default options."""
    return InspectContext.from_options(InspectOptions())
