from enum import StrEnum

import attrs


class PrincipalRole(StrEnum):
    USER = 'user'
    VENDOR = 'vendor'


@attrs.define
class Principal:
    """Caller identity decoded from the bearer token (no DB lookup)"""

    id: str
    role: PrincipalRole

    @property
    def is_vendor(self) -> bool:
        return self.role == PrincipalRole.VENDOR
