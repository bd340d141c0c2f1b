"""Who is placing an order. Both gateways feed the same assembler path."""

from dataclasses import dataclass


@dataclass(frozen=True)
class SessionCaller:
    """An end customer authenticated by the identity collaborator."""

    user_id: str
    role: str


@dataclass(frozen=True)
class PartnerCaller:
    """An external integrator authenticated by API key."""

    api_key_id: str


Caller = SessionCaller | PartnerCaller
