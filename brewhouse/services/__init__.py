"""
                        Services Module

External collaborators of the storefront, each behind a small interface
with interchangeable implementations.

Services:
    - storage: blob store for the menu, order history and cloud config
    - descriptions: menu description generator (Mock / Gemini)
"""
