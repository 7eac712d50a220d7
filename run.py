# -*- coding: utf-8 -*-

"""
Main entry point for running an LP Toolkit build from a checkout.

    python run.py build --project-root path/to/lp
"""

import sys

from lp_toolkit.cli import main

if __name__ == '__main__':
    sys.exit(main())
