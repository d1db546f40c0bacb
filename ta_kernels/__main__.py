"""
CLI entry point for the ta_kernels package.

Allows running as: python -m ta_kernels
"""

import sys

from ta_kernels.main import main

if __name__ == "__main__":
    sys.exit(main())
