from .models import HistoricDecisionExecution
from .store import InMemoryHistoryStore, SqlHistoryStore

__all__ = [
    "HistoricDecisionExecution",
    "InMemoryHistoryStore",
    "SqlHistoryStore",
]
