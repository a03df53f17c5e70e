"""
The main entry point for the MML formatter.
"""
import sys
import logging


def main():
    """Runs the command-line interface and exits with its status."""
    log = logging.getLogger("mmlformat")

    try:
        from .cli import run_cli
        status = run_cli()
    except Exception:
        log.exception("A critical error occurred while running the CLI.")
        sys.exit(1)
    sys.exit(status)


if __name__ == '__main__':
    main()
