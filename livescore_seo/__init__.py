"""Layered SEO configuration and metadata resolution for the live-score site."""

__version__ = "1.0.0"
