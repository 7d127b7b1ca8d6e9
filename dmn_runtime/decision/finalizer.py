"""
DMN Runtime - Audit Finalizer

Stops the audit clock and dispatches historic persistence. The container is
stopped before persistence is attempted, so a failed write leaves timing
consistent.
"""

from .audit import ExecutionAuditContainer, ExecutionServiceAuditContainer
from .commands import PersistHistoricDecisionExecutionCmd
from .context import ExecuteDecisionContext
from .executor import CommandExecutor
from ..errors import NotADecisionServiceError


def persist_decision_audit(
    command_executor: CommandExecutor,
    context: ExecuteDecisionContext,
) -> ExecutionAuditContainer:
    decision_execution = context.decision_execution
    
    decision_execution.stop_audit()
    
    command_executor.execute(PersistHistoricDecisionExecutionCmd(context))
    
    return decision_execution


def persist_decision_service_audit(
    command_executor: CommandExecutor,
    context: ExecuteDecisionContext,
) -> ExecutionServiceAuditContainer:
    decision_service_execution = context.decision_execution
    if not isinstance(decision_service_execution, ExecutionServiceAuditContainer):
        raise NotADecisionServiceError(
            f"Execution of {context.decision_id} has no decision service audit"
        )
    
    decision_service_execution.stop_audit()
    
    command_executor.execute(PersistHistoricDecisionExecutionCmd(context))
    
    return decision_service_execution
