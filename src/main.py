"""
ccmclient - Configuration Manager client administration toolkit.

Runs the CLI straight from a source checkout: python src/main.py --help
"""

from ccmclient.interface.cli import main


if __name__ == "__main__":
    main()
