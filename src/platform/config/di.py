"""
https://python-dependency-injector.ets-labs.org/index.html
https://python-dependency-injector.ets-labs.org/examples/fastapi.html
"""

from dependency_injector import containers, providers

from src.platform.config.core_setting import Settings
from src.platform.database.mongo_setting import get_database
from src.platform.event.in_memory_broadcaster import InMemoryEventBroadcasterImpl
from src.service.ordering.app.service.cart_snapshot_builder import CartSnapshotBuilder
from src.service.ordering.app.service.coupon_reconciler import CouponReconciler
from src.service.ordering.driven_adapter.repo.booking_command_repo_impl import (
    BookingCommandRepoImpl,
)
from src.service.ordering.driven_adapter.repo.booking_query_repo_impl import BookingQueryRepoImpl
from src.service.ordering.driven_adapter.repo.cart_repo_impl import CartRepoImpl
from src.service.ordering.driven_adapter.repo.coupon_repo_impl import CouponRepoImpl
from src.service.ordering.driven_adapter.repo.customer_query_repo_impl import (
    CustomerQueryRepoImpl,
)
from src.service.ordering.driven_adapter.repo.vendor_query_repo_impl import VendorQueryRepoImpl
from src.service.ordering.driving_adapter.http_controller.auth.jwt_auth import JwtAuth


class Container(containers.DeclarativeContainer):
    # Configuration
    config_service = providers.Singleton(Settings)

    # MongoDB (client is created lazily on first use, closed in the lifespan)
    database_factory = providers.Object(get_database)

    # Repositories (stateless - resolve the database per call)
    booking_command_repo = providers.Singleton(
        BookingCommandRepoImpl, database_factory=database_factory
    )
    booking_query_repo = providers.Singleton(
        BookingQueryRepoImpl, database_factory=database_factory
    )
    cart_repo = providers.Singleton(CartRepoImpl, database_factory=database_factory)
    coupon_repo = providers.Singleton(CouponRepoImpl, database_factory=database_factory)
    vendor_query_repo = providers.Singleton(
        VendorQueryRepoImpl, database_factory=database_factory
    )
    customer_query_repo = providers.Singleton(
        CustomerQueryRepoImpl, database_factory=database_factory
    )

    # Booking application services
    cart_snapshot_builder = providers.Singleton(CartSnapshotBuilder, cart_repo=cart_repo)
    coupon_reconciler = providers.Singleton(
        CouponReconciler, coupon_repo=coupon_repo, cart_repo=cart_repo
    )

    # Process-scoped live status registry, closed on shutdown
    event_broadcaster = providers.Singleton(
        InMemoryEventBroadcasterImpl,
        buffer_size=config_service.provided.SSE_STREAM_BUFFER_SIZE,
    )

    # Auth service
    jwt_auth = providers.Singleton(JwtAuth)


container = Container()


def setup() -> None:
    container.config_service()
    container.event_broadcaster()


def cleanup() -> None:
    container.reset_singletons()
