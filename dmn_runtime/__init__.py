"""
DMN Runtime

Executes decisions and decision services against caller requests and
records an audit trail of every execution.
"""

from .decision import (
    DecisionOrchestrator,
    ExecuteDecisionBuilder,
    ExecutionAuditContainer,
    ExecutionRequest,
    ExecutionServiceAuditContainer,
)
from .engine import DecisionEngine, build_engine
from .errors import (
    DecisionEngineError,
    DecisionEvaluationError,
    DefinitionValidationError,
    MissingChildResultError,
    MultipleResultsError,
    NotADecisionError,
    NotADecisionServiceError,
    UnresolvedElementError,
    UnsupportedElementError,
)
from .model import Decision, DecisionService, Definitions, load_definitions

__all__ = [
    "DecisionOrchestrator",
    "ExecuteDecisionBuilder",
    "ExecutionAuditContainer",
    "ExecutionRequest",
    "ExecutionServiceAuditContainer",
    "DecisionEngine",
    "build_engine",
    "DecisionEngineError",
    "DecisionEvaluationError",
    "DefinitionValidationError",
    "MissingChildResultError",
    "MultipleResultsError",
    "NotADecisionError",
    "NotADecisionServiceError",
    "UnresolvedElementError",
    "UnsupportedElementError",
    "Decision",
    "DecisionService",
    "Definitions",
    "load_definitions",
]
