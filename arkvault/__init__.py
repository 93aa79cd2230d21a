"""Data model for backup arks: typed keys, manifests, vaults, client configuration, progress and receipts."""

__version__ = "0.0.2"

__all__ = [
    "client_config",
    "diffing",
    "engine",
    "keys",
    "manifest",
    "objects",
    "progress",
    "receipt",
    "vault",
]