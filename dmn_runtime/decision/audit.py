"""
DMN Runtime - Execution Audit Containers

Record of one execution's timing and results.
Returned to callers and persisted as historic decision executions.
"""

from typing import Any, Dict, List, Optional
from datetime import datetime, timezone
import logging

from pydantic import BaseModel, Field

from ..errors import MissingChildResultError

logger = logging.getLogger(__name__)

Row = Dict[str, Any]


def _now() -> datetime:
    return datetime.now(timezone.utc)


class ExecutionAuditContainer(BaseModel):
    """
    Audit of a single decision execution.
    
    Written by the evaluator (rows, failure) and by the finalizer (end time).
    """
    decision_key: str
    decision_name: Optional[str] = None
    decision_version: Optional[int] = None
    deployment_id: Optional[str] = None
    tenant_id: Optional[str] = None
    
    # Timing
    started_at: datetime = Field(default_factory=_now)
    ended_at: Optional[datetime] = None
    duration_ms: Optional[int] = None
    
    input_variables: Dict[str, Any] = {}
    decision_result: List[Row] = []
    
    # Outcome
    failed: bool = False
    exception_message: Optional[str] = None
    
    def stop_audit(self) -> None:
        """Mark the execution as finished"""
        self.ended_at = _now()
        self.duration_ms = int((self.ended_at - self.started_at).total_seconds() * 1000)
        logger.debug(f"Stopped audit for {self.decision_key} after {self.duration_ms}ms")
    
    def set_failed(self, message: str) -> None:
        self.failed = True
        self.exception_message = message
    
    def to_json(self) -> str:
        return self.model_dump_json(indent=2)
    
    @classmethod
    def from_json(cls, json_str: str):
        return cls.model_validate_json(json_str)


class ExecutionServiceAuditContainer(ExecutionAuditContainer):
    """
    Audit of a decision service execution.
    
    Holds one child container per evaluated decision and the composed
    service result keyed by output decision id.
    """
    decision_service_result: Dict[str, List[Row]] = {}
    child_decision_executions: Dict[str, ExecutionAuditContainer] = {}
    
    def add_child_decision_execution(self, decision_id: str, execution: ExecutionAuditContainer) -> None:
        self.child_decision_executions[decision_id] = execution
    
    def get_child_decision_execution(self, decision_id: str) -> ExecutionAuditContainer:
        """
        Get the child execution for a decision.
        
        Raises:
            MissingChildResultError: If the decision was not evaluated
        """
        try:
            return self.child_decision_executions[decision_id]
        except KeyError:
            raise MissingChildResultError(decision_id) from None
    
    def set_decision_service_result(self, result: Dict[str, List[Row]]) -> None:
        self.decision_service_result = result
