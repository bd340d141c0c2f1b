"""Fake identity adapter — in-memory token registry for tests and development."""

from ordering.identity.port import IdentityPort, VerifiedUser


class FakeIdentity(IdentityPort):
    def __init__(self):
        self._tokens: dict[str, VerifiedUser] = {}

    def register(self, token: str, user_id: str, role: str = "USER", email: str | None = None, name: str | None = None):
        """Make ``token`` resolve to the given user."""
        self._tokens[token] = VerifiedUser(user_id=user_id, role=role, email=email, name=name)

    def verify_token(self, token: str) -> VerifiedUser | None:
        return self._tokens.get(token)
