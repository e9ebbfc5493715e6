"""
Domain exceptions for the SEO engine.
"""

class SeoException(Exception):
    """Base exception for SEO-related errors."""
    pass

class ConfigLayerError(SeoException):
    """Raised when a configuration layer is present but cannot be used."""

    def __init__(self, layer: str, reason: str):
        super().__init__(f"{layer}: {reason}")
        self.layer = layer
        self.reason = reason

class InvalidRuntimeStoreError(SeoException):
    """Raised when a runtime store swap is given something that is not a valid store."""
    pass
