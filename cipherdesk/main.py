"""Entry module: the engine class plus the command-line front end."""

from .engine import cipherdesk, cli, main

__all__ = ["cipherdesk", "cli", "main"]
