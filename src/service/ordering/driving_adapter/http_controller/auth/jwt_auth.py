"""
Bearer token verification

Tokens are issued by the auth service; this side only decodes them and
rebuilds the caller identity from the claims (no DB query).
"""

from typing import Any, Dict, Optional

import jwt

from src.platform.config.core_setting import settings
from src.platform.exception.exceptions import AuthenticationError
from src.service.ordering.domain.entity.principal_entity import Principal, PrincipalRole


class JwtAuth:
    def __init__(self) -> None:
        self.secret = settings.SECRET_KEY.get_secret_value()
        self.algorithm = settings.ALGORITHM

    def decode_jwt_token(self, token: str) -> Dict[str, Any]:
        try:
            return jwt.decode(token, self.secret, algorithms=[self.algorithm])
        except jwt.PyJWTError:
            raise AuthenticationError('Invalid token')

    def get_principal_from_jwt(self, token: Optional[str]) -> Principal:
        if not token:
            raise AuthenticationError('Not authenticated')

        payload = self.decode_jwt_token(token)

        subject = payload.get('sub')
        role = payload.get('role')
        if not subject or not role:
            raise AuthenticationError('Invalid token')

        try:
            principal_role = PrincipalRole(role)
        except ValueError:
            raise AuthenticationError('Invalid token')

        return Principal(id=str(subject), role=principal_role)
