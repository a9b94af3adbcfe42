import pytest

from src.platform.exception.exceptions import NotFoundError
from src.platform.logging.loguru_io import Logger
from src.platform.logging.loguru_io_config import MASK, access_log_level
from src.platform.logging.loguru_io_utils import mask_sensitive, should_mask_keyword


pytestmark = pytest.mark.unit


class TestAccessLogLevel:
    @pytest.mark.parametrize(
        'message,expected',
        [
            ('127.0.0.1:50312 - "GET /api/bookings/my-orders HTTP/1.1" 200', 'SUCCESS'),
            ('127.0.0.1:50312 - "GET /docs HTTP/1.1" 307', 'WARNING'),
            ('127.0.0.1:50312 - "PUT /api/vendor/orders/x/respond HTTP/1.1" 404', 'ERROR'),
            ('127.0.0.1:50312 - "POST /api/bookings HTTP/1.1" 500', 'CRITICAL'),
        ],
    )
    def test_status_maps_to_level(self, message, expected):
        assert access_log_level(message) == expected

    def test_other_messages_are_left_alone(self):
        assert access_log_level('Application startup complete.') is None


class TestMasking:
    def test_token_values_are_masked_in_reprs(self):
        masked = mask_sensitive("{'token': 'eyJhbGciOi', 'page': 1}")

        assert 'eyJhbGciOi' not in masked
        assert MASK in masked
        assert "'page': 1" in masked

    def test_payment_references_are_masked_by_keyword(self):
        assert should_mask_keyword('transaction_id', 'txn-42') == MASK
        assert should_mask_keyword('payment_method', 'upi') == 'upi'


class TestLoggerIo:
    @pytest.mark.asyncio
    async def test_async_return_value_passes_through(self):
        @Logger.io
        async def total(*, a: int, b: int) -> int:
            return a + b

        assert await total(a=2, b=3) == 5

    @pytest.mark.asyncio
    async def test_errors_are_reraised(self):
        @Logger.io
        async def lookup() -> None:
            raise NotFoundError('Booking not found')

        with pytest.raises(NotFoundError):
            await lookup()

    def test_sync_functions_are_supported(self):
        @Logger.io
        def double(value: int) -> int:
            return value * 2

        assert double(4) == 8
