"""
DMN Runtime - Decision Repository

Holds deployed definitions and resolves decision keys to elements.

Every deployment of an element key within a tenant gets the next version.
Resolution prefers the version from a parent deployment when one is given,
then the latest version, then (optionally) the default tenant.
"""

import logging
import threading
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Dict, List, Optional, Tuple

from .errors import UnresolvedElementError
from .model.elements import DecisionModelElement, Definitions

logger = logging.getLogger(__name__)


@dataclass
class Deployment:
    """Record of one deploy call."""
    deployment_id: str
    definitions_id: str
    name: Optional[str]
    tenant_id: Optional[str]
    deployed_at: datetime


@dataclass
class DeployedElement:
    """A decision or decision service as deployed at a given version."""
    element: DecisionModelElement
    definitions: Definitions
    deployment_id: str
    version: int
    tenant_id: Optional[str] = None


@dataclass
class DecisionRepository:
    """In-memory store of deployed decision definitions."""
    _elements: Dict[Tuple[Optional[str], str], List[DeployedElement]] = field(default_factory=dict)
    _deployments: Dict[str, Deployment] = field(default_factory=dict)
    _lock: threading.Lock = field(default_factory=threading.Lock)
    
    def deploy(
        self,
        definitions: Definitions,
        tenant_id: Optional[str] = None,
        name: Optional[str] = None,
    ) -> Deployment:
        """
        Deploy a definitions document.
        
        Each decision and decision service gets a new version under its key.
        """
        definitions.validate_structure()
        
        deployment = Deployment(
            deployment_id=str(uuid.uuid4()),
            definitions_id=definitions.id,
            name=name or definitions.name,
            tenant_id=tenant_id,
            deployed_at=datetime.now(timezone.utc),
        )
        
        with self._lock:
            for key, element in definitions.elements().items():
                versions = self._elements.setdefault((tenant_id, key), [])
                versions.append(DeployedElement(
                    element=element,
                    definitions=definitions,
                    deployment_id=deployment.deployment_id,
                    version=len(versions) + 1,
                    tenant_id=tenant_id,
                ))
            self._deployments[deployment.deployment_id] = deployment
        
        logger.info(
            f"Deployed definitions {definitions.id} as {deployment.deployment_id}"
            f" (tenant: {tenant_id or '<default>'})"
        )
        return deployment
    
    def get_deployment(self, deployment_id: str) -> Optional[Deployment]:
        return self._deployments.get(deployment_id)
    
    def list_versions(self, key: str, tenant_id: Optional[str] = None) -> List[DeployedElement]:
        with self._lock:
            return list(self._elements.get((tenant_id, key), []))
    
    def resolve(
        self,
        key: str,
        tenant_id: Optional[str] = None,
        fallback_to_default_tenant: bool = False,
        parent_deployment_id: Optional[str] = None,
    ) -> DeployedElement:
        """
        Resolve a decision or decision service key.
        
        Raises:
            UnresolvedElementError: If no deployed element matches
        """
        with self._lock:
            deployed = self._find(key, tenant_id, parent_deployment_id)
            if deployed is None and tenant_id is not None and fallback_to_default_tenant:
                deployed = self._find(key, None, parent_deployment_id)
        
        if deployed is None:
            tenant_label = f" for tenant {tenant_id}" if tenant_id else ""
            raise UnresolvedElementError(
                f"No decision or decision service found with key {key}{tenant_label}"
            )
        
        return deployed
    
    def _find(
        self,
        key: str,
        tenant_id: Optional[str],
        parent_deployment_id: Optional[str],
    ) -> Optional[DeployedElement]:
        versions = self._elements.get((tenant_id, key))
        if not versions:
            return None
        
        if parent_deployment_id:
            for deployed in reversed(versions):
                if deployed.deployment_id == parent_deployment_id:
                    return deployed
        
        return versions[-1]
