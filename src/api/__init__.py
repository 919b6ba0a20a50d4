"""HTTP surface over the tracker."""

from src.api.server import create_app

__all__ = ["create_app"]
