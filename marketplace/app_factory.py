"""Entry point for uvicorn: ``uvicorn marketplace.app_factory:app``."""
from marketplace.app import create_app

app = create_app()

__all__ = ["app", "create_app"]
