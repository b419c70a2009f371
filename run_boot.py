# run_boot.py
import sys

from retirement_calc.boot import main

if __name__ == "__main__":
    sys.exit(main())
