from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class AuthSession:
    """Identity handed over by the external sign-in flow"""
    user_id: Optional[str] = None
    access_token: Optional[str] = None

    @property
    def is_authenticated(self) -> bool:
        return bool(self.user_id and self.access_token)


ANONYMOUS = AuthSession()
