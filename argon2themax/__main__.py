"""
Argon2TheMax CLI Entry Point

This module allows running Argon2TheMax as:
    python -m argon2themax [command] [options]
"""

from argon2themax.cli import cli

if __name__ == "__main__":
    cli()
