# retirement_calc/ui/event_bus.py
from PyQt6.QtCore import QObject, pyqtSignal

class EventBus(QObject):
    dataChanged = pyqtSignal(object)          # emits a RetirementCalculatorData
    projectionReady = pyqtSignal(object)      # emits a ProjectionSummary
    calculationFailed = pyqtSignal(str)       # message shown verbatim to the user
    logRecorded = pyqtSignal(object)          # emits a LogEntry

# shared default; controllers and log sinks accept their own bus instead
bus = EventBus()
