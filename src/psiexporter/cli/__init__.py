"""
Command-line interface for the psiexporter package.
"""

from .main import main_cli

__all__ = [
    "main_cli",
]
