"""
Test Configuration and Fixtures

- Environment is prepared before any application module reads settings
- Unit tests build use cases directly with fakes or AsyncMock repositories
- API tests run the test app with the DI container overridden by fakes
"""

# =============================================================================
# Environment setup MUST happen before any other imports
# =============================================================================
import os
from pathlib import Path


def _early_setup_test_environment() -> None:
    test_log_dir = Path(__file__).parent / 'test_log'
    test_log_dir.mkdir(exist_ok=True)
    os.environ['TEST_LOG_DIR'] = str(test_log_dir)
    os.environ.setdefault('SECRET_KEY', 'test_secret_key_for_ordering_tests')
    os.environ.setdefault('MONGODB_DATABASE', 'food_ordering_test')


_early_setup_test_environment()

from collections.abc import AsyncIterator, Callable, Iterator  # noqa: E402
from datetime import datetime, timedelta, timezone  # noqa: E402

from fastapi.testclient import TestClient  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
import jwt  # noqa: E402
import pytest  # noqa: E402

from src.platform.config.core_setting import Settings, settings  # noqa: E402
from src.platform.config.di import container  # noqa: E402
from src.platform.config.wire_modules import WIRE_MODULES  # noqa: E402
from test.service.ordering.builders import (  # noqa: E402
    USER_ID,
    VENDOR_ID,
    make_cart,
    make_customer,
    make_vendor,
)
from test.service.ordering.fakes import (  # noqa: E402
    FakeBookingRepo,
    FakeCartRepo,
    FakeCouponRepo,
    FakeCustomerRepo,
    FakeVendorRepo,
)
from test.test_main import app  # noqa: E402


def make_token(*, subject: str, role: str, expires_in: timedelta = timedelta(hours=1)) -> str:
    payload = {
        'sub': subject,
        'role': role,
        'exp': datetime.now(timezone.utc) + expires_in,
        'iat': datetime.now(timezone.utc),
    }
    return jwt.encode(payload, settings.SECRET_KEY.get_secret_value(), algorithm=settings.ALGORITHM)


@pytest.fixture
def auth_headers() -> Callable[..., dict[str, str]]:
    def _headers(*, subject: str = USER_ID, role: str = 'user') -> dict[str, str]:
        return {'Authorization': f'Bearer {make_token(subject=subject, role=role)}'}

    return _headers


@pytest.fixture
def user_headers(auth_headers) -> dict[str, str]:
    return auth_headers(subject=USER_ID, role='user')


@pytest.fixture
def vendor_headers(auth_headers) -> dict[str, str]:
    return auth_headers(subject=VENDOR_ID, role='vendor')


# =============================================================================
# DI overrides for API tests
# =============================================================================
@pytest.fixture
def booking_repo() -> FakeBookingRepo:
    return FakeBookingRepo()


@pytest.fixture
def cart_repo() -> FakeCartRepo:
    return FakeCartRepo(make_cart())


@pytest.fixture
def coupon_repo() -> FakeCouponRepo:
    return FakeCouponRepo()


@pytest.fixture
def test_settings() -> Settings:
    return Settings(
        BOOKING_VENDOR_WAIT_SECONDS=0.2,
        BOOKING_POLL_INTERVAL_SECONDS=0.01,
        SSE_PING_SECONDS=1,
    )


@pytest.fixture
def overridden_container(booking_repo, cart_repo, coupon_repo, test_settings) -> Iterator[None]:
    container.config_service.override(test_settings)
    container.booking_command_repo.override(booking_repo)
    container.booking_query_repo.override(booking_repo)
    container.cart_repo.override(cart_repo)
    container.coupon_repo.override(coupon_repo)
    container.vendor_query_repo.override(FakeVendorRepo(make_vendor()))
    container.customer_query_repo.override(FakeCustomerRepo(make_customer()))
    # services built from the overridden repos on first use
    container.reset_singletons()

    yield

    container.reset_override()
    container.reset_singletons()


@pytest.fixture
def client(overridden_container) -> Iterator[TestClient]:
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
async def async_client(overridden_container) -> AsyncIterator[AsyncClient]:
    # ASGITransport does not run the lifespan, so wire here
    container.wire(modules=WIRE_MODULES)
    try:
        async with AsyncClient(transport=ASGITransport(app=app), base_url='http://test') as client:
            yield client
    finally:
        container.unwire()
