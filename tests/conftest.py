"""
Test configuration for taxcompare.

pyproject.toml puts the project root on sys.path, so both 'taxcompare' and
'tests.demo_profiles' import without an install.
"""
import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from taxcompare.main import app


@pytest_asyncio.fixture
async def client():
    """Async httpx client using ASGI transport — no live server needed."""
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac


@pytest.fixture
def fy2024_25_pair():
    from taxcompare.engine.regimes import get_regime_pair
    return get_regime_pair("FY2024-25")
