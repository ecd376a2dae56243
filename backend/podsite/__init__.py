"""
Podsite

Marketing site backend and lightweight CMS for a podcast's episode catalog.
"""

__version__ = "1.0.0"
