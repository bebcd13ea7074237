#!/usr/bin/env python3
"""
qvirtuallist demo launcher.

Run this from the project root to start the virtual list demo gallery.
"""

import sys

if __name__ == '__main__':
    from qvirtuallist.run_gui import run_gui, suppress_warnings
    suppress_warnings()
    sys.exit(run_gui())
