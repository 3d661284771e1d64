"""HTTP surface of the marketplace ledger (FastAPI)."""

from marketplace_api.app import create_app

__all__ = ["create_app"]
