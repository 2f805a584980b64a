"""
Character Vault CLI

Command-line interface for the Character Vault.
"""

from .main import cli

__all__ = ["cli"]


def main() -> None:
    """Main CLI entry point."""
    cli()


if __name__ == "__main__":
    main()
