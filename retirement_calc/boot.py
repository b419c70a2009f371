# retirement_calc/boot.py
"""
Batch entry point: log to logs/boot.log, project the saved snapshot (or the
defaults) and write the projection table to CSV.
"""

import os, sys, logging, traceback, datetime, argparse
from typing import List, Optional

from . import config
from .core import store
from .core.projection import (
    RetirementCalculator,
    default_data,
    export_projections_csv,
)

logger = logging.getLogger(__name__)

def configure_logging(log_dir: str = config.LOG_DIR, level: int = logging.INFO) -> str:
    """File + stderr logging and a crash-dump excepthook. Returns the log path."""
    os.makedirs(log_dir, exist_ok=True)
    log_path = os.path.join(log_dir, "boot.log")

    root = logging.getLogger("retirement_calc")
    root.setLevel(level)
    for h in list(root.handlers):
        if getattr(h, "_boot_handler", False):
            root.removeHandler(h)
            h.close()

    fmt = logging.Formatter("%(asctime)s [%(levelname)s] %(name)s: %(message)s")
    for h in (logging.FileHandler(log_path, mode="w", encoding="utf-8"),
              logging.StreamHandler(sys.stderr)):
        h.setFormatter(fmt)
        h._boot_handler = True
        root.addHandler(h)

    def _excepthook(exctype, value, tb):
        ts = datetime.datetime.now().strftime("%Y%m%d-%H%M%S")
        crash_file = os.path.join(log_dir, f"crash_{ts}.log")
        with open(crash_file, "w", encoding="utf-8") as f:
            traceback.print_exception(exctype, value, tb, file=f)
        logger.critical("Uncaught exception logged to %s", crash_file)

    sys.excepthook = _excepthook
    logger.info("starting at %s", datetime.datetime.now().isoformat())
    return log_path

def run(output: Optional[str] = None, use_defaults: bool = False) -> str:
    """Project the stored snapshot and export it. Returns the CSV path."""
    data = None if use_defaults else store.get_data()
    if data is None:
        logger.info("No saved snapshot, using default data")
        data = default_data()

    summary = RetirementCalculator(data).calculate()
    logger.info("Projected %d years (%s-%s)", len(summary.projections),
                summary.projections[0].year if summary.projections else "-",
                summary.projections[-1].year if summary.projections else "-")
    logger.info("Final portfolio value: $%s", f"{summary.final_portfolio_value:,.0f}")
    if summary.goal_achieving_year is not None:
        logger.info("Savings goal reached in %d", summary.goal_achieving_year)
    else:
        logger.info("Savings goal not reached")

    path = export_projections_csv(summary, output)
    logger.info("Saved: %s", path)
    return path

def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Project a retirement snapshot to CSV.")
    parser.add_argument("-o", "--output", help="CSV path (default: dated file name)")
    parser.add_argument("--defaults", action="store_true", help="ignore saved data")
    parser.add_argument("--log-dir", default=config.LOG_DIR)
    args = parser.parse_args(argv)

    configure_logging(args.log_dir)
    try:
        run(args.output, use_defaults=args.defaults)
    except Exception:
        logger.exception("Projection run failed")
        return 1
    return 0
