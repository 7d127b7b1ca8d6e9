"""
DMN Runtime - Execution Request & Context

ExecutionRequest is what the caller asks for. The context builder resolves
it against the repository into an ExecuteDecisionContext, which is owned by
exactly one orchestrator call and threaded through dispatch, composition
and audit finalization.
"""

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Dict, List, Optional
import logging

from pydantic import BaseModel

from ..model.elements import DecisionModelElement, Definitions
from ..repository import DecisionRepository
from .audit import ExecutionAuditContainer, Row

if TYPE_CHECKING:
    from .audit import ExecutionServiceAuditContainer
    from .orchestrator import DecisionOrchestrator

logger = logging.getLogger(__name__)


class ExecutionRequest(BaseModel):
    """Caller-supplied execution request."""
    decision_key: str
    variables: Dict[str, Any] = {}
    
    # Resolution
    tenant_id: Optional[str] = None
    fallback_to_default_tenant: bool = False
    parent_deployment_id: Optional[str] = None
    
    # Correlation, recorded on the historic execution
    instance_id: Optional[str] = None
    execution_id: Optional[str] = None
    activity_id: Optional[str] = None
    scope_type: Optional[str] = None
    
    # Keep child executions of non-output decisions on service audits
    include_intermediate_outputs: bool = False


@dataclass
class ExecuteDecisionContext:
    """State of a single decision execution."""
    request: ExecutionRequest
    element: DecisionModelElement
    definitions: Definitions
    deployment_id: str
    version: int
    tenant_id: Optional[str] = None
    variables: Dict[str, Any] = field(default_factory=dict)
    
    # Set by the dispatched unit of work
    decision_execution: Optional[ExecutionAuditContainer] = None
    
    @property
    def decision_id(self) -> str:
        return self.element.id
    
    def new_audit_container(self, decision: DecisionModelElement, container_cls=ExecutionAuditContainer):
        """Create an audit container stamped with this context's deployment data."""
        return container_cls(
            decision_key=decision.id,
            decision_name=decision.name,
            decision_version=self.version,
            deployment_id=self.deployment_id,
            tenant_id=self.tenant_id,
            input_variables=dict(self.variables),
        )


class DecisionContextBuilder:
    """Builds execution contexts from requests."""
    
    def __init__(self, repository: DecisionRepository):
        self.repository = repository
    
    def build(self, request: ExecutionRequest) -> ExecuteDecisionContext:
        """
        Resolve the request into a fresh context.
        
        Raises:
            UnresolvedElementError: If the key does not resolve
        """
        deployed = self.repository.resolve(
            request.decision_key,
            tenant_id=request.tenant_id,
            fallback_to_default_tenant=request.fallback_to_default_tenant,
            parent_deployment_id=request.parent_deployment_id,
        )
        
        logger.debug(
            f"Resolved {request.decision_key} to {deployed.element.kind} "
            f"v{deployed.version} ({deployed.deployment_id})"
        )
        
        return ExecuteDecisionContext(
            request=request,
            element=deployed.element,
            definitions=deployed.definitions,
            deployment_id=deployed.deployment_id,
            version=deployed.version,
            tenant_id=deployed.tenant_id,
            variables=dict(request.variables),
        )


class ExecuteDecisionBuilder:
    """
    Fluent request builder bound to an orchestrator.
    
    Usage:
        rows = (
            orchestrator.create_execute_decision_builder()
            .decision_key("approval")
            .variable("amount", 500)
            .execute()
        )
    """
    
    def __init__(self, orchestrator: "DecisionOrchestrator"):
        self._orchestrator = orchestrator
        self._decision_key: Optional[str] = None
        self._variables: Dict[str, Any] = {}
        self._options: Dict[str, Any] = {}
    
    def decision_key(self, key: str) -> "ExecuteDecisionBuilder":
        self._decision_key = key
        return self
    
    def variable(self, name: str, value: Any) -> "ExecuteDecisionBuilder":
        self._variables[name] = value
        return self
    
    def variables(self, variables: Dict[str, Any]) -> "ExecuteDecisionBuilder":
        self._variables.update(variables)
        return self
    
    def tenant_id(self, tenant_id: str) -> "ExecuteDecisionBuilder":
        self._options["tenant_id"] = tenant_id
        return self
    
    def fallback_to_default_tenant(self) -> "ExecuteDecisionBuilder":
        self._options["fallback_to_default_tenant"] = True
        return self
    
    def parent_deployment_id(self, deployment_id: str) -> "ExecuteDecisionBuilder":
        self._options["parent_deployment_id"] = deployment_id
        return self
    
    def instance_id(self, instance_id: str) -> "ExecuteDecisionBuilder":
        self._options["instance_id"] = instance_id
        return self
    
    def execution_id(self, execution_id: str) -> "ExecuteDecisionBuilder":
        self._options["execution_id"] = execution_id
        return self
    
    def activity_id(self, activity_id: str) -> "ExecuteDecisionBuilder":
        self._options["activity_id"] = activity_id
        return self
    
    def scope_type(self, scope_type: str) -> "ExecuteDecisionBuilder":
        self._options["scope_type"] = scope_type
        return self
    
    def include_intermediate_outputs(self, include: bool = True) -> "ExecuteDecisionBuilder":
        self._options["include_intermediate_outputs"] = include
        return self
    
    def build_request(self) -> ExecutionRequest:
        if not self._decision_key:
            raise ValueError("decision_key is required")
        return ExecutionRequest(
            decision_key=self._decision_key,
            variables=dict(self._variables),
            **self._options,
        )
    
    # Terminal operations
    
    def evaluate(self) -> Dict[str, List[Row]]:
        return self._orchestrator.evaluate_decision(self.build_request())
    
    def evaluate_with_audit_trail(self) -> ExecutionAuditContainer:
        return self._orchestrator.evaluate_decision_with_audit_trail(self.build_request())
    
    def execute(self) -> List[Row]:
        return self._orchestrator.execute_decision(self.build_request())
    
    def execute_with_single_result(self) -> Optional[Row]:
        return self._orchestrator.execute_decision_with_single_result(self.build_request())
    
    def execute_with_audit_trail(self) -> ExecutionAuditContainer:
        return self._orchestrator.execute_decision_with_audit_trail(self.build_request())
    
    def execute_decision_service(self) -> Dict[str, List[Row]]:
        return self._orchestrator.execute_decision_service(self.build_request())
    
    def execute_decision_service_with_audit_trail(self) -> "ExecutionServiceAuditContainer":
        return self._orchestrator.execute_decision_service_with_audit_trail(self.build_request())
