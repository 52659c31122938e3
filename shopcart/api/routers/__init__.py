"""Convenience exports for API routers."""

from . import cart, products

__all__ = ["cart", "products"]
