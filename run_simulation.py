"""
Run a single pinch-off simulation from the repository root.

Creates simulationCases/<CaseNo>/, copies the parameter file and the source
file, compiles the selected case and runs it.

Usage:
    python run_simulation.py [params_file] [--exec exec_code] [--threads N]
"""

import os
import sys

from pinchoff.driver.cli import main


if __name__ == "__main__":
    sys.exit(main(sys.argv[1:], project_root=os.path.dirname(os.path.abspath(__file__))))
