"""
vmbind CLI Entry Point
======================

Allows running vmbind as a module: python -m vmbind
"""

from vmbind.cli.main import main

if __name__ == "__main__":
    main()
