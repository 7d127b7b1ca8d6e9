"""
DMN Runtime - Decision Evaluator

Runs registered decision handlers in requirement order and records their
rows into audit containers.

Row computation itself belongs to the handlers: a handler receives the
current variables and returns a list of rows, a single row, or None.
Each handler sees the caller's variables plus the rows of the decisions it
directly requires, as ``variables[decision_id]``. A single-row requirement
is also merged in, without replacing caller-supplied variables.
"""

from collections.abc import Mapping
from typing import Any, Callable, Dict, Iterable, List, Optional
import logging

from ..errors import DecisionEvaluationError
from ..model.elements import Decision, DecisionService, Definitions
from .audit import ExecutionAuditContainer, ExecutionServiceAuditContainer, Row
from .context import ExecuteDecisionContext

logger = logging.getLogger(__name__)


DecisionHandler = Callable[[Dict[str, Any]], Any]


def dependency_order(definitions: Definitions, targets: Iterable[str]) -> List[str]:
    """
    Topologically sorted ids of ``targets`` and everything they require.
    
    Requirements come before the decisions that consume them.
    """
    # Collect the closure
    closure: Dict[str, Decision] = {}
    pending = list(targets)
    while pending:
        decision_id = pending.pop(0)
        if decision_id in closure:
            continue
        decision = definitions.get_decision(decision_id)
        if decision is None:
            raise DecisionEvaluationError(decision_id, "decision not found in definitions")
        closure[decision_id] = decision
        pending.extend(ref.parsed_id for ref in decision.required_decisions)
    
    # Kahn's algorithm
    in_degree = {
        decision_id: len({ref.parsed_id for ref in decision.required_decisions})
        for decision_id, decision in closure.items()
    }
    queue = [decision_id for decision_id, degree in in_degree.items() if degree == 0]
    order = []
    
    while queue:
        decision_id = queue.pop(0)
        order.append(decision_id)
        
        for other_id, other in closure.items():
            if decision_id in {ref.parsed_id for ref in other.required_decisions}:
                in_degree[other_id] -= 1
                if in_degree[other_id] == 0:
                    queue.append(other_id)
    
    if len(order) != len(closure):
        unresolved = [d for d in closure if d not in order]
        raise DecisionEvaluationError(
            unresolved[0], f"circular decision requirements between {unresolved}"
        )
    
    return order


class DecisionEvaluator:
    """Registry of decision handlers and the graph walk that runs them."""
    
    def __init__(self):
        self._handlers: Dict[str, DecisionHandler] = {}
    
    def register_handler(self, decision_id: str, handler: DecisionHandler) -> None:
        """Register the handler computing rows for a decision"""
        self._handlers[decision_id] = handler
        logger.debug(f"Registered handler for decision: {decision_id}")
    
    def decision_handler(self, decision_id: str):
        """
        Decorator form of register_handler.
        
        Usage:
            @evaluator.decision_handler("discount")
            def discount(variables):
                return [{"rate": 0.1}] if variables["total"] > 100 else []
        """
        def decorator(func: DecisionHandler) -> DecisionHandler:
            self.register_handler(decision_id, func)
            return func
        
        return decorator
    
    # =========================================================================
    # EVALUATION
    # =========================================================================
    
    def evaluate_decision(
        self,
        context: ExecuteDecisionContext,
        decision: Decision,
        container: ExecutionAuditContainer,
    ) -> List[Row]:
        """Evaluate a decision, its requirements first, into ``container``."""
        results: Dict[str, List[Row]] = {}
        
        for decision_id in dependency_order(context.definitions, [decision.id]):
            required = context.definitions.get_decision(decision_id)
            variables = self._inputs_for(required, context.variables, results)
            results[decision_id] = self._run(required, variables)
        
        rows = results[decision.id]
        container.decision_result = rows
        logger.debug(f"Decision {decision.id} produced {len(rows)} rows")
        return rows
    
    def evaluate_decision_service(
        self,
        context: ExecuteDecisionContext,
        service: DecisionService,
        container: ExecutionServiceAuditContainer,
    ) -> None:
        """Evaluate every decision of a service into its own child container."""
        output_ids = [ref.parsed_id for ref in service.output_decisions]
        targets = output_ids + [ref.parsed_id for ref in service.encapsulated_decisions]
        results: Dict[str, List[Row]] = {}
        
        for decision_id in dependency_order(context.definitions, targets):
            decision = context.definitions.get_decision(decision_id)
            variables = self._inputs_for(decision, context.variables, results)
            child = context.new_audit_container(decision)
            child.input_variables = dict(variables)
            container.add_child_decision_execution(decision_id, child)
            
            try:
                rows = self._run(decision, variables)
            except DecisionEvaluationError as e:
                child.set_failed(str(e))
                child.stop_audit()
                raise
            
            child.decision_result = rows
            child.stop_audit()
            results[decision_id] = rows
        
        if not context.request.include_intermediate_outputs:
            for decision_id in list(container.child_decision_executions):
                if decision_id not in output_ids:
                    del container.child_decision_executions[decision_id]
        
        logger.debug(
            f"Decision service {service.id} evaluated "
            f"{len(container.child_decision_executions)} child decisions"
        )
    
    def _run(self, decision: Optional[Decision], variables: Dict[str, Any]) -> List[Row]:
        handler = self._handlers.get(decision.id)
        if handler is None:
            raise DecisionEvaluationError(decision.id, "no handler registered")
        
        try:
            result = handler(dict(variables))
        except DecisionEvaluationError:
            raise
        except Exception as e:
            logger.error(f"Decision {decision.id} handler failed: {e}")
            raise DecisionEvaluationError(decision.id, str(e), e) from e
        
        return self._normalize(decision.id, result)
    
    @staticmethod
    def _normalize(decision_id: str, result: Any) -> List[Row]:
        if result is None:
            return []
        if isinstance(result, Mapping):
            return [dict(result)]
        if isinstance(result, (list, tuple)):
            rows = []
            for row in result:
                if not isinstance(row, Mapping):
                    raise DecisionEvaluationError(
                        decision_id, f"handler returned a non-mapping row: {row!r}"
                    )
                rows.append(dict(row))
            return rows
        raise DecisionEvaluationError(
            decision_id, f"handler returned unsupported result type {type(result).__name__}"
        )
    
    @staticmethod
    def _inputs_for(
        decision: Decision,
        caller_variables: Dict[str, Any],
        results: Dict[str, List[Row]],
    ) -> Dict[str, Any]:
        """
        Input view of one decision: the caller's variables plus the rows of
        the decisions it directly requires. Merged columns of a single-row
        requirement never replace a caller-supplied variable.
        """
        variables = dict(caller_variables)
        for ref in decision.required_decisions:
            rows = results[ref.parsed_id]
            if len(rows) == 1:
                for name, value in rows[0].items():
                    if name not in caller_variables:
                        variables[name] = value
            variables[ref.parsed_id] = rows
        return variables
