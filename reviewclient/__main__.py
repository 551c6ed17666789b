"""Main entry point when executing reviewclient as a package.

This allows running the package using python -m reviewclient.
"""

from reviewclient.main import cli_entry_point

if __name__ == "__main__":
    cli_entry_point()
