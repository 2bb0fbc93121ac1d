"""
                Brewhouse Storefront

Order lifecycle backend for a coffee-shop storefront: menu catalog,
cart, checkout, order tracking and a small admin surface, with
hybrid Mock/Real external services.

Version: 1.0.0
License: MIT
"""

__version__ = "1.0.0"
