"""Identity collaborator — turns a session bearer token into a verified user."""

import os

_identity_instance = None


def get_identity():
    """Return the configured identity adapter (singleton).

    Uses FakeIdentity by default. Deployments select an adapter through the
    IDENTITY_ADAPTER environment variable.
    """
    global _identity_instance
    if _identity_instance is None:
        adapter = os.environ.get("IDENTITY_ADAPTER", "fake")
        if adapter == "fake":
            from ordering.identity.fake_adapter import FakeIdentity

            _identity_instance = FakeIdentity()
        else:
            raise ValueError(f"Unknown identity adapter: {adapter}")
    return _identity_instance


def reset_identity():
    """Reset the identity singleton (useful for testing)."""
    global _identity_instance
    _identity_instance = None
