"""
DMN Runtime - Units of Work

Each command runs one named kind of execution against a context and writes
its outcome into the context's audit container. Commands are dispatched
through the CommandExecutor.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional, Protocol
import logging

from ..core.config import Settings
from ..errors import DecisionEvaluationError, NotADecisionError, NotADecisionServiceError
from ..history.models import HistoricDecisionExecution
from ..history.store import dump_execution
from .audit import ExecutionServiceAuditContainer
from .context import ExecuteDecisionContext
from .evaluator import DecisionEvaluator

logger = logging.getLogger(__name__)


class UnitOfWork(str, Enum):
    """Named kinds of dispatched work."""
    EVALUATE = "evaluate"
    EXECUTE = "execute"
    EXECUTE_WITH_AUDIT = "execute_with_audit"
    EXECUTE_DECISION_SERVICE = "execute_decision_service"
    PERSIST_HISTORY = "persist_history"


class HistoryStore(Protocol):
    def save(self, record: HistoricDecisionExecution) -> str: ...


@dataclass
class CommandContext:
    """Collaborators available to every command."""
    evaluator: DecisionEvaluator
    history_store: HistoryStore
    settings: Settings


class Command:
    """Base class for dispatched units of work."""
    unit_of_work: UnitOfWork
    
    def __init__(self, context: ExecuteDecisionContext):
        self.context = context
    
    def execute(self, command_context: CommandContext) -> Any:
        raise NotImplementedError


class EvaluateDecisionCmd(Command):
    """
    Evaluate a decision or a decision service.
    
    Always records into a service audit container; a plain decision is
    evaluated as the container's only child.
    """
    unit_of_work = UnitOfWork.EVALUATE
    
    def execute(self, command_context: CommandContext) -> None:
        ctx = self.context
        element = ctx.element
        container = ctx.new_audit_container(element, ExecutionServiceAuditContainer)
        ctx.decision_execution = container
        
        if element.kind == "decision_service":
            command_context.evaluator.evaluate_decision_service(ctx, element, container)
        else:
            child = ctx.new_audit_container(element)
            container.add_child_decision_execution(element.id, child)
            rows = command_context.evaluator.evaluate_decision(ctx, element, child)
            child.stop_audit()
            container.decision_result = rows


class ExecuteDecisionCmd(Command):
    """Execute a single decision; evaluation failures propagate."""
    unit_of_work = UnitOfWork.EXECUTE
    
    def execute(self, command_context: CommandContext) -> None:
        ctx = self.context
        if ctx.element.kind != "decision":
            raise NotADecisionError(
                f"{ctx.decision_id} is a decision service; use execute_decision_service"
            )
        
        ctx.decision_execution = ctx.new_audit_container(ctx.element)
        self._evaluate(command_context)
    
    def _evaluate(self, command_context: CommandContext) -> None:
        command_context.evaluator.evaluate_decision(
            self.context, self.context.element, self.context.decision_execution
        )


class ExecuteDecisionWithAuditTrailCmd(ExecuteDecisionCmd):
    """Execute a single decision; evaluation failures are recorded on the audit."""
    unit_of_work = UnitOfWork.EXECUTE_WITH_AUDIT
    
    def _evaluate(self, command_context: CommandContext) -> None:
        try:
            super()._evaluate(command_context)
        except DecisionEvaluationError as e:
            logger.warning(f"Recording failed execution of {self.context.decision_id}: {e}")
            self.context.decision_execution.set_failed(str(e))


class ExecuteDecisionServiceCmd(Command):
    """Execute a decision service; evaluation failures propagate."""
    unit_of_work = UnitOfWork.EXECUTE_DECISION_SERVICE
    
    def execute(self, command_context: CommandContext) -> None:
        ctx = self.context
        if ctx.element.kind != "decision_service":
            raise NotADecisionServiceError(
                f"{ctx.decision_id} is not a decision service"
            )
        
        container = ctx.new_audit_container(ctx.element, ExecutionServiceAuditContainer)
        ctx.decision_execution = container
        command_context.evaluator.evaluate_decision_service(ctx, ctx.element, container)


class PersistHistoricDecisionExecutionCmd(Command):
    """Write the finalized context as a historic decision execution."""
    unit_of_work = UnitOfWork.PERSIST_HISTORY
    
    def execute(self, command_context: CommandContext) -> Optional[str]:
        if not command_context.settings.HISTORY_ENABLED:
            logger.debug(f"History disabled, not persisting {self.context.decision_id}")
            return None
        
        record = self.to_record(self.context)
        return command_context.history_store.save(record)
    
    @staticmethod
    def to_record(ctx: ExecuteDecisionContext) -> HistoricDecisionExecution:
        execution = ctx.decision_execution
        request = ctx.request
        if isinstance(execution, ExecutionServiceAuditContainer):
            decision_type = "decision_service"
        else:
            decision_type = "decision"
        return HistoricDecisionExecution(
            decision_key=ctx.decision_id,
            decision_name=ctx.element.name,
            decision_version=ctx.version,
            deployment_id=ctx.deployment_id,
            decision_type=decision_type,
            tenant_id=ctx.tenant_id,
            instance_id=request.instance_id,
            execution_id=request.execution_id,
            activity_id=request.activity_id,
            scope_type=request.scope_type,
            started_at=execution.started_at,
            ended_at=execution.ended_at,
            failed=execution.failed,
            execution_json=dump_execution(execution.model_dump()),
        )
