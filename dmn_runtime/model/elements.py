"""
DMN Runtime - Decision Model Elements

A deployed definitions document holds decisions and decision services.
The two element kinds form a tagged union on ``kind``.
"""

from typing import Annotated, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, Field, model_validator

from ..errors import DefinitionValidationError


class ElementReference(BaseModel):
    """Reference to a decision, e.g. ``#approval``."""
    href: str
    
    @model_validator(mode="before")
    @classmethod
    def _from_string(cls, data):
        if isinstance(data, str):
            return {"href": data}
        return data
    
    @property
    def parsed_id(self) -> str:
        return self.href[1:] if self.href.startswith("#") else self.href


class Decision(BaseModel):
    """A leaf decision producing an ordered list of rows."""
    kind: Literal["decision"] = "decision"
    id: str
    name: Optional[str] = None
    
    # Decisions whose output this decision consumes
    required_decisions: List[ElementReference] = []


class DecisionService(BaseModel):
    """A group of decisions exposing one or more output decisions."""
    kind: Literal["decision_service"] = "decision_service"
    id: str
    name: Optional[str] = None
    
    output_decisions: List[ElementReference] = Field(min_length=1)
    encapsulated_decisions: List[ElementReference] = []


DecisionModelElement = Annotated[
    Union[Decision, DecisionService],
    Field(discriminator="kind"),
]


class Definitions(BaseModel):
    """A deployable document of decisions and decision services."""
    id: str
    name: Optional[str] = None
    decisions: List[Decision] = []
    decision_services: List[DecisionService] = []
    
    def get_decision(self, decision_id: str) -> Optional[Decision]:
        for decision in self.decisions:
            if decision.id == decision_id:
                return decision
        return None
    
    def elements(self) -> Dict[str, Union[Decision, DecisionService]]:
        """All elements keyed by id."""
        result: Dict[str, Union[Decision, DecisionService]] = {}
        for decision in self.decisions:
            result[decision.id] = decision
        for service in self.decision_services:
            result[service.id] = service
        return result
    
    def validate_structure(self) -> None:
        """
        Validate the document before deployment.
        
        Raises:
            DefinitionValidationError: duplicate ids, dangling references
                or circular decision requirements
        """
        seen = set()
        for element_id in [d.id for d in self.decisions] + [s.id for s in self.decision_services]:
            if element_id in seen:
                raise DefinitionValidationError(
                    f"Duplicate element id {element_id} in definitions {self.id}"
                )
            seen.add(element_id)
        
        decision_ids = {d.id for d in self.decisions}
        
        for decision in self.decisions:
            for ref in decision.required_decisions:
                if ref.parsed_id not in decision_ids:
                    raise DefinitionValidationError(
                        f"Decision {decision.id} requires unknown decision {ref.parsed_id}"
                    )
        
        for service in self.decision_services:
            for ref in service.output_decisions + service.encapsulated_decisions:
                if ref.parsed_id not in decision_ids:
                    raise DefinitionValidationError(
                        f"Decision service {service.id} references unknown decision {ref.parsed_id}"
                    )
        
        state: Dict[str, int] = {}
        for decision in self.decisions:
            self._check_circular(decision.id, state, [])
    
    def _check_circular(self, decision_id: str, state: Dict[str, int], path: List[str]) -> None:
        # 1 = on the current path, 2 = fully explored
        if state.get(decision_id) == 2:
            return
        if state.get(decision_id) == 1:
            raise DefinitionValidationError(
                f"Circular decision requirement detected: {' -> '.join(path + [decision_id])}"
            )
        state[decision_id] = 1
        path.append(decision_id)
        
        decision = self.get_decision(decision_id)
        if decision:
            for ref in decision.required_decisions:
                self._check_circular(ref.parsed_id, state, path)
        
        path.pop()
        state[decision_id] = 2
