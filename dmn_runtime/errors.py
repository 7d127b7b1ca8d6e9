"""
DMN Runtime - Decision Errors

Failures raised while resolving, executing and composing decisions.
"""

from typing import Any, Dict, List, Optional


class DecisionEngineError(Exception):
    """Base class for all decision runtime errors."""
    pass


class DefinitionValidationError(DecisionEngineError):
    """Raised when a definitions document fails validation on deploy."""
    pass


class UnresolvedElementError(DecisionEngineError):
    """Raised when a request does not resolve to a decision or decision service."""
    pass


class NotADecisionServiceError(DecisionEngineError):
    """Raised when a decision-service-only operation runs against a plain decision."""
    pass


class NotADecisionError(DecisionEngineError):
    """Raised when a decision-only unit of work runs against a decision service."""
    pass


class UnsupportedElementError(DecisionEngineError):
    """Raised when the resolved element is neither a decision nor a decision service."""
    pass


class MultipleResultsError(DecisionEngineError):
    """Raised when a single-result execution produced more than one row."""

    def __init__(self, decision_id: str, rows: List[Dict[str, Any]]):
        self.decision_id = decision_id
        self.rows = rows
        self.count = len(rows)
        super().__init__(
            f"Decision {decision_id} produced {self.count} results, expected at most one"
        )


class MissingChildResultError(DecisionEngineError):
    """Raised when an output decision has no evaluated child execution."""

    def __init__(self, decision_id: str):
        self.decision_id = decision_id
        super().__init__(f"No child execution recorded for decision {decision_id}")


class DecisionEvaluationError(DecisionEngineError):
    """Raised when a decision handler is missing or fails."""

    def __init__(self, decision_id: str, message: str, cause: Optional[BaseException] = None):
        self.decision_id = decision_id
        self.cause = cause
        super().__init__(f"Decision {decision_id} failed: {message}")
