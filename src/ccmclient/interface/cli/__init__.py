"""
CLI package for ccmclient.
"""

from .cli import main

__all__ = ["main"]
