"""
Rich output formatters for the CLI.
"""

from ccmclient.interface.cli.formatters.result_formatters import ResultFormatter

__all__ = ["ResultFormatter"]
