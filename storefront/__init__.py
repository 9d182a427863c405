"""
Storefront ordering backend.
Cart, checkout, order fulfilment and admin management services.
"""

__version__ = "1.0.0"
