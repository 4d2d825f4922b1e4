"""
Allow running ospdevctl as a module: python -m osp_devices.cli
"""

import sys
from .ospdevctl import main

if __name__ == "__main__":
    sys.exit(main())
