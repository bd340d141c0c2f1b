"""Catalogue store access — one relational store per process (singleton)."""

import os

_store_instance = None


def get_store():
    """Return the configured catalogue store.

    The database comes from CATALOGUE_DATABASE_URI and the per-call timeout
    from STORAGE_TIMEOUT_SECONDS.
    """
    global _store_instance
    if _store_instance is None:
        from catalogue.store import CatalogueStore

        _store_instance = CatalogueStore(
            os.environ.get("CATALOGUE_DATABASE_URI", "sqlite:///catalogue.db"),
            timeout=float(os.environ.get("STORAGE_TIMEOUT_SECONDS", "5")),
        )
    return _store_instance


def configure_store(database_uri, timeout=None):
    """Point the catalogue at a specific database (tests, management scripts)."""
    global _store_instance
    from catalogue.store import CatalogueStore

    if _store_instance is not None:
        _store_instance.dispose()
    if timeout is None:
        timeout = float(os.environ.get("STORAGE_TIMEOUT_SECONDS", "5"))
    _store_instance = CatalogueStore(database_uri, timeout=timeout)
    return _store_instance


def reset_store():
    """Drop the singleton so the next call re-reads the environment."""
    global _store_instance
    if _store_instance is not None:
        _store_instance.dispose()
    _store_instance = None
