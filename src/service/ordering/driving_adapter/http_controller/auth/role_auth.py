from typing import Optional

from dependency_injector.wiring import Provide, inject
from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from opentelemetry import trace

from src.platform.config.di import Container
from src.platform.exception.exceptions import ForbiddenError
from src.service.ordering.domain.entity.principal_entity import Principal, PrincipalRole
from src.service.ordering.driving_adapter.http_controller.auth.jwt_auth import JwtAuth


bearer_scheme = HTTPBearer(auto_error=False)


class RoleAuthStrategy:
    @staticmethod
    def can_place_booking(principal: Principal) -> bool:
        return principal.role == PrincipalRole.USER

    @staticmethod
    def can_manage_orders(principal: Principal) -> bool:
        return principal.role == PrincipalRole.VENDOR


@inject
async def get_current_principal(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    jwt_auth: JwtAuth = Depends(Provide[Container.jwt_auth]),
) -> Principal:
    return jwt_auth.get_principal_from_jwt(credentials.credentials if credentials else None)


async def require_user(principal: Principal = Depends(get_current_principal)) -> Principal:
    tracer = trace.get_tracer(__name__)
    with tracer.start_as_current_span(
        'auth.require_user',
        attributes={'principal.id': principal.id, 'principal.role': principal.role.value},
    ):
        if not RoleAuthStrategy.can_place_booking(principal):
            raise ForbiddenError('Only customers can perform this action')
        return principal


async def require_vendor(principal: Principal = Depends(get_current_principal)) -> Principal:
    tracer = trace.get_tracer(__name__)
    with tracer.start_as_current_span(
        'auth.require_vendor',
        attributes={'principal.id': principal.id, 'principal.role': principal.role.value},
    ):
        if not RoleAuthStrategy.can_manage_orders(principal):
            raise ForbiddenError('Only vendors can perform this action')
        return principal
