"""Storefront package: merchants list products, customers browse them."""

from .api import app

__all__ = ["app"]
