# retirement_calc/config.py
"""
Runtime settings. Everything here can be overridden through the environment
before the package is imported.
"""

import os

DATA_DIR = os.environ.get("RETIREMENT_CALC_DATA_DIR", "data/retirement")
LOG_DIR = os.environ.get("RETIREMENT_CALC_LOG_DIR", "logs")

# main snapshot record + flat-file fallback cache key
MAIN_DATA_FILE = "calculator_data.json"
SNAPSHOTS_FILE = "portfolio_snapshots.json"
AUTOSAVE_KEY = "retirement_calculator_autosave"

# rapid edits coalesce into one calculation this long after the last edit
RECALC_DEBOUNCE_MS = int(os.environ.get("RETIREMENT_CALC_DEBOUNCE_MS", "500"))

# debug console keeps only the most recent records
LOG_CACHE_SIZE = 100
