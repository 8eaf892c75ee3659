"""
Standalone 'biosample-analyzer-version' entry point.

Reads only the version module, so packaging checks and shell scripts can
query the installed release without loading typer, rich or pydantic.
"""
import sys


def main():
    """Print the installed release and exit."""
    from biosample_analyzer.version import __version__
    print(f"biosample-analyzer version {__version__}")
    sys.exit(0)


if __name__ == "__main__":
    main()
