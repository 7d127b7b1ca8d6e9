"""
DMN Runtime - Result Composer

Shapes a completed context into the caller-facing result. The shape follows
the resolved element: rows for a decision, rows keyed by output decision id
for a decision service.
"""

from typing import Dict, List
import logging

from ..errors import MissingChildResultError, NotADecisionServiceError, UnsupportedElementError
from .audit import ExecutionServiceAuditContainer, Row
from .context import ExecuteDecisionContext

logger = logging.getLogger(__name__)


def compose_decision_result(context: ExecuteDecisionContext) -> List[Row]:
    """Rows recorded on the context's audit container."""
    return context.decision_execution.decision_result


def compose_decision_service_result(context: ExecuteDecisionContext) -> Dict[str, List[Row]]:
    """
    Collect the rows of every output decision of a decision service.
    
    The mapping is also stored on the service audit container so that
    persistence sees the same shape the caller gets.
    
    Raises:
        NotADecisionServiceError: If the element is not a decision service
        MissingChildResultError: If an output decision was not evaluated
    """
    element = context.element
    if element.kind != "decision_service":
        raise NotADecisionServiceError(
            f"Main execution {context.decision_id} was not a decision service"
        )
    
    container = context.decision_execution
    result: Dict[str, List[Row]] = {}
    
    for reference in element.output_decisions:
        decision_id = reference.parsed_id
        try:
            child = container.get_child_decision_execution(decision_id)
        except MissingChildResultError:
            logger.error(
                f"Decision service {element.id} has no execution for output decision {decision_id}"
            )
            raise
        result[decision_id] = child.decision_result
    
    container.set_decision_service_result(result)
    return result


def compose_evaluate_decision_result(context: ExecuteDecisionContext) -> Dict[str, List[Row]]:
    """Result of an evaluate call, keyed by decision id for either element kind."""
    kind = context.element.kind
    
    if kind == "decision_service":
        return compose_decision_service_result(context)
    
    if kind == "decision":
        result = {context.decision_id: context.decision_execution.decision_result}
        if isinstance(context.decision_execution, ExecutionServiceAuditContainer):
            context.decision_execution.set_decision_service_result(result)
        return result
    
    logger.error("Execution was not a decision or decision service")
    raise UnsupportedElementError(
        f"Execution of {context.decision_id} was not a decision or decision service"
    )
