from datetime import datetime, timezone

import pytest

# 12:17:37 in Berlin (CET)
FIXED_NOW = datetime(2023, 1, 24, 11, 17, 37, tzinfo=timezone.utc)


@pytest.fixture
def clock():
    return lambda: FIXED_NOW
