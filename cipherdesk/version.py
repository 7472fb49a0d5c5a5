"""Runtime engine version, also used as the package version."""

from .main import cipherdesk


__version__ = str(cipherdesk.ENGINE_VERSION).strip()


__all__ = ["__version__"]
