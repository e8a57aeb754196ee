"""Core configuration"""

from .config import DEFAULT_API_URL, Config

__all__ = ["Config", "DEFAULT_API_URL"]
