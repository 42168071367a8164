"""Configuration loading for lbcert."""

from lbcert.config.loader import ConfigLoader

__all__ = ["ConfigLoader"]
