"""
Services Package

Business logic on top of the episode stores.
"""
