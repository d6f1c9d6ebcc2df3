from unittest.mock import AsyncMock, MagicMock

import pytest


def _mock_verifier(result: bool) -> MagicMock:
    verifier = MagicMock()
    verifier.validate = AsyncMock(return_value=result)
    return verifier


@pytest.fixture
def passing_verifier() -> MagicMock:
    return _mock_verifier(True)


@pytest.fixture
def failing_verifier() -> MagicMock:
    return _mock_verifier(False)
