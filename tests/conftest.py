#
# Pytest Fixtures
#

# Third party ----------------------------------------------------------------------------------------------------------
import pytest

# Local ----------------------------------------------------------------------------------------------------------------
from pyspew import config
from pyspew.config import SpewOptions


# Fixtures -------------------------------------------------------------------------------------------------------------

@pytest.fixture(autouse=True)
def default_options(monkeypatch) -> SpewOptions:
    """Give every test a pristine process-wide default and restore it afterwards."""
    options = SpewOptions()
    monkeypatch.setattr(config, "_default_options", options)
    return options


@pytest.fixture
def stable() -> SpewOptions:
    """Options producing output without identities, for exact comparisons."""
    return SpewOptions(disable_pointer_addresses=True)
