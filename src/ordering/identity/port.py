"""Identity port — the interface session authentication programs against.

Signup, login and token issuance belong to the identity collaborator; the
order desk only asks it who a bearer token belongs to.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass(frozen=True)
class VerifiedUser:
    user_id: str
    role: str
    email: str | None = None
    name: str | None = None


class IdentityPort(ABC):
    @abstractmethod
    def verify_token(self, token: str) -> VerifiedUser | None:
        """Return the user a token was issued to, or None if it is not valid."""
        ...
