# retirement_calc/ui/recalc.py
"""
Debounced recalculation around the projection engine.

Edits replace the whole snapshot; each one restarts a single-shot timer so a
burst of edits produces one save + calculation once the user pauses. A failed
calculation suspends automatic recalculation until retry() or reset().
"""

from __future__ import annotations
import logging
from typing import Optional

from PyQt6.QtCore import QObject, QTimer

from .. import config
from ..core import store
from ..core.projection import (
    RetirementCalculator,
    RetirementCalculatorData,
    default_data,
    validate_snapshot,
)
from .event_bus import EventBus, bus as default_bus
from .log_console import LogConsole

logger = logging.getLogger(__name__)

class RecalcController(QObject):
    def __init__(self, bus: Optional[EventBus] = None,
                 debounce_ms: int = config.RECALC_DEBOUNCE_MS,
                 console: Optional[LogConsole] = None, parent=None):
        super().__init__(parent)
        self.bus = bus or default_bus
        # debug console sees every package log record on this bus
        self.console = (console or LogConsole(bus=self.bus)).attach()
        self.data: Optional[RetirementCalculatorData] = None
        self.summary = None
        self.error: Optional[str] = None
        self.suspended = False

        self._timer = QTimer(self)
        self._timer.setSingleShot(True)
        self._timer.setInterval(debounce_ms)
        self._timer.timeout.connect(self.flush)

    # ---------- loading ----------

    def initialize(self) -> RetirementCalculatorData:
        """Load the saved snapshot, else the autosave cache, else defaults."""
        try:
            saved = store.get_data()
            logger.info("Data from store: %s", "found" if saved else "not found")
            if saved is None:
                cached = store.get_key(config.AUTOSAVE_KEY)
                logger.info("Autosaved data: %s", "found" if cached else "not found")
                if cached:
                    saved = RetirementCalculatorData.from_dict(cached)
            if saved is None:
                logger.info("Creating new default data")
                saved = default_data()
            self.error = None
        except (OSError, ValueError, KeyError, TypeError) as e:
            logger.error("Failed to load data: %s", e)
            saved = default_data()
            self.error = f"Failed to load data: {e}"
        self.set_data(saved)
        return saved

    # ---------- edits ----------

    @property
    def pending(self) -> bool:
        return self._timer.isActive()

    def set_data(self, data: RetirementCalculatorData):
        self.data = data
        self.bus.dataChanged.emit(data)
        self._schedule()

    def _apply(self, builder, *args, **kwargs):
        if self.data is None:
            return
        self.set_data(builder(self.data, *args, **kwargs))

    def update_household(self, household):
        self._apply(RetirementCalculatorData.with_household, household)

    def update_financial_inputs(self, inputs):
        self._apply(RetirementCalculatorData.with_financial_inputs, inputs)

    def add_account(self, account):
        self._apply(RetirementCalculatorData.add_account, account)

    def update_account(self, account_id: str, **updates):
        self._apply(RetirementCalculatorData.update_account, account_id, **updates)

    def delete_account(self, account_id: str):
        self._apply(RetirementCalculatorData.delete_account, account_id)

    def add_income_source(self, source, owner=None):
        self._apply(RetirementCalculatorData.add_income_source, source, owner)

    def update_income_source(self, source_id: str, owner, **updates):
        self._apply(RetirementCalculatorData.update_income_source, source_id, owner, **updates)

    def delete_income_source(self, source_id: str, owner):
        self._apply(RetirementCalculatorData.delete_income_source, source_id, owner)

    def add_portfolio_snapshot(self, snapshot):
        self._apply(RetirementCalculatorData.add_portfolio_snapshot, snapshot)

    # ---------- calculation ----------

    def _schedule(self):
        if self.suspended:
            logger.info("Recalculation suspended after an error; waiting for retry")
            return
        self._timer.start()

    def _save(self, data: RetirementCalculatorData):
        try:
            store.save_data(data)
        except (OSError, TypeError, ValueError) as e:
            logger.warning("Failed to save to store: %s", e)
        if not store.save_key(config.AUTOSAVE_KEY, data.to_dict()):
            logger.warning("Failed to save autosave cache")

    def flush(self):
        """Save and recalculate now. Returns the summary, or None on failure."""
        self._timer.stop()
        data = self.data
        if data is None:
            return None

        self._save(data)

        try:
            issues = validate_snapshot(data)
            for msg in issues["errors"] + issues["warnings"]:
                logger.warning("Input check: %s", msg)

            summary = RetirementCalculator(data).calculate()
        except Exception as e:
            self.error = f"Calculation failed: {e}"
            self.suspended = True
            logger.error(self.error)
            self.bus.calculationFailed.emit(self.error)
            return None

        logger.info("Calculation complete: %d years, ending value %.2f",
                    len(summary.projections), summary.final_portfolio_value)
        self.summary = summary
        self.error = None
        self.bus.projectionReady.emit(summary)
        return summary

    def retry(self):
        self.suspended = False
        self.error = None
        return self.flush()

    def reset(self):
        """Discard the current snapshot in favour of defaults."""
        self.suspended = False
        self.error = None
        self.set_data(default_data())

    def close(self):
        """Stop any pending recalculation and release the log console."""
        self._timer.stop()
        self.console.detach()
