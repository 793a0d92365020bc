#!/usr/bin/env python3
"""
holdfix - Main Entry Point
Wirelength report and hold-time repair for routed FPGA designs
"""

import sys
from pathlib import Path

# Add the package directory to Python path
package_dir = Path(__file__).parent
if str(package_dir) not in sys.path:
    sys.path.insert(0, str(package_dir))

from holdfix.presentation.cli import main


if __name__ == '__main__':
    sys.exit(main())
