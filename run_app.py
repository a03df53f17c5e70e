"""
Entry point for running the formatter from a source checkout.
"""

from mmlformat.main import main

if __name__ == "__main__":
    main()
