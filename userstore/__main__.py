"""Entry point for `python -m userstore`."""

from .cli import cli


if __name__ == "__main__":
    cli()
