"""
DMN Runtime - Decision execution

Builds execution contexts, dispatches units of work, composes results and
finalizes audits.
"""

from .audit import ExecutionAuditContainer, ExecutionServiceAuditContainer
from .context import DecisionContextBuilder, ExecuteDecisionBuilder, ExecuteDecisionContext, ExecutionRequest
from .evaluator import DecisionEvaluator
from .executor import CommandExecutor
from .orchestrator import DecisionOrchestrator

__all__ = [
    "ExecutionAuditContainer",
    "ExecutionServiceAuditContainer",
    "DecisionContextBuilder",
    "ExecuteDecisionBuilder",
    "ExecuteDecisionContext",
    "ExecutionRequest",
    "DecisionEvaluator",
    "CommandExecutor",
    "DecisionOrchestrator",
]
