"""Peakbook - a social catalogue of mountains, wishlists and summits."""

__version__ = "0.1.0"
