"""Storefront entities mirrored from the hosted platform."""

from .customer import CustomerProfile
from .product import Product

__all__ = ["CustomerProfile", "Product"]
