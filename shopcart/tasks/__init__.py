"""Celery task definitions package."""

from shopcart.tasks import carts  # noqa: F401

__all__ = ["carts"]
