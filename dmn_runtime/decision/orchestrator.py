"""
DMN Runtime - Decision Orchestrator

Public entry point for running decisions and decision services.

Every operation follows the same protocol:
1. Build a fresh context from the request
2. Dispatch one unit of work (synchronous; a failure ends the call)
3. Compose the caller-facing result
4. Stop the audit clock and persist the historic execution, exactly once
"""

from typing import Dict, List, Optional
import logging

from ..errors import MultipleResultsError
from .audit import ExecutionAuditContainer, ExecutionServiceAuditContainer, Row
from .commands import (
    EvaluateDecisionCmd,
    ExecuteDecisionCmd,
    ExecuteDecisionServiceCmd,
    ExecuteDecisionWithAuditTrailCmd,
)
from .composer import (
    compose_decision_result,
    compose_decision_service_result,
    compose_evaluate_decision_result,
)
from .context import DecisionContextBuilder, ExecuteDecisionBuilder, ExecutionRequest
from .executor import CommandExecutor
from .finalizer import persist_decision_audit, persist_decision_service_audit

logger = logging.getLogger(__name__)


class DecisionOrchestrator:
    """Runs decision requests through dispatch, composition and audit."""
    
    def __init__(
        self,
        context_builder: DecisionContextBuilder,
        command_executor: CommandExecutor,
    ) -> None:
        self.context_builder = context_builder
        self.command_executor = command_executor
    
    def create_execute_decision_builder(self) -> ExecuteDecisionBuilder:
        return ExecuteDecisionBuilder(self)
    
    def evaluate_decision(self, request: ExecutionRequest) -> Dict[str, List[Row]]:
        """
        Evaluate a decision or decision service.
        
        A plain decision yields a single-entry mapping keyed by its id.
        """
        context = self.context_builder.build(request)
        
        self.command_executor.execute(EvaluateDecisionCmd(context))
        
        decision_result = compose_evaluate_decision_result(context)
        
        persist_decision_service_audit(self.command_executor, context)
        
        return decision_result
    
    def evaluate_decision_with_audit_trail(self, request: ExecutionRequest) -> ExecutionAuditContainer:
        context = self.context_builder.build(request)
        
        self.command_executor.execute(EvaluateDecisionCmd(context))
        
        compose_decision_result(context)
        
        return persist_decision_audit(self.command_executor, context)
    
    def execute_decision(self, request: ExecutionRequest) -> List[Row]:
        context = self.context_builder.build(request)
        
        self.command_executor.execute(ExecuteDecisionCmd(context))
        
        decision_result = compose_decision_result(context)
        
        persist_decision_audit(self.command_executor, context)
        
        return decision_result
    
    def execute_decision_with_single_result(self, request: ExecutionRequest) -> Optional[Row]:
        """
        Execute a decision expected to produce at most one row.
        
        Returns:
            The row, or None when the decision produced no rows
        
        Raises:
            MultipleResultsError: If more than one row was produced
        """
        context = self.context_builder.build(request)
        
        self.command_executor.execute(ExecuteDecisionCmd(context))
        
        decision_result = compose_decision_result(context)
        
        persist_decision_audit(self.command_executor, context)
        
        if not decision_result:
            return None
        
        if len(decision_result) > 1:
            logger.warning(
                f"Decision {context.decision_id} produced {len(decision_result)} results: {decision_result}"
            )
            raise MultipleResultsError(context.decision_id, decision_result)
        
        return decision_result[0]
    
    def execute_decision_with_audit_trail(self, request: ExecutionRequest) -> ExecutionAuditContainer:
        context = self.context_builder.build(request)
        
        self.command_executor.execute(ExecuteDecisionWithAuditTrailCmd(context))
        
        compose_decision_result(context)
        
        return persist_decision_audit(self.command_executor, context)
    
    def execute_decision_service(self, request: ExecutionRequest) -> Dict[str, List[Row]]:
        context = self.context_builder.build(request)
        
        self.command_executor.execute(ExecuteDecisionServiceCmd(context))
        
        decision_result = compose_decision_service_result(context)
        
        persist_decision_service_audit(self.command_executor, context)
        
        return decision_result
    
    def execute_decision_service_with_audit_trail(
        self,
        request: ExecutionRequest,
    ) -> ExecutionServiceAuditContainer:
        context = self.context_builder.build(request)
        
        self.command_executor.execute(ExecuteDecisionServiceCmd(context))
        
        compose_decision_service_result(context)
        
        return persist_decision_service_audit(self.command_executor, context)
