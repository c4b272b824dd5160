"""
GameHaven: storefront data layer for browsing, buying and downloading games.
"""

__version__ = "0.1.0"
