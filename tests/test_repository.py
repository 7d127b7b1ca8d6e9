"""
Definitions loading and repository resolution tests.
"""

import time

import pytest

from dmn_runtime.errors import DefinitionValidationError, UnresolvedElementError
from dmn_runtime.model.elements import Decision, DecisionService, Definitions
from dmn_runtime.model.loader import load_definitions, loads_definitions
from dmn_runtime.repository import DecisionRepository

LOAN_YAML = """
id: loan
name: Loan decisions
decisions:
  - id: risk
  - id: approval
    name: Approval
    required_decisions: ["#risk"]
decision_services:
  - id: loan_service
    output_decisions: ["#approval"]
    encapsulated_decisions: ["#risk"]
"""


class TestDefinitionsLoading:
    
    def test_yaml_document(self):
        definitions = loads_definitions(LOAN_YAML)
        
        assert definitions.id == "loan"
        assert definitions.get_decision("approval").required_decisions[0].parsed_id == "risk"
        service = definitions.elements()["loan_service"]
        assert service.kind == "decision_service"
        assert [ref.parsed_id for ref in service.output_decisions] == ["approval"]
    
    def test_yaml_file(self, tmp_path):
        path = tmp_path / "loan.yaml"
        path.write_text(LOAN_YAML)
        
        definitions = load_definitions(path)
        
        assert set(definitions.elements()) == {"risk", "approval", "loan_service"}
    
    def test_bare_ids_accepted(self):
        definitions = loads_definitions("""
id: bare
decisions: [{id: a}, {id: b, required_decisions: [a]}]
""")
        
        assert definitions.get_decision("b").required_decisions[0].parsed_id == "a"
    
    def test_duplicate_ids_rejected(self):
        with pytest.raises(DefinitionValidationError, match="Duplicate"):
            loads_definitions("""
id: dup
decisions: [{id: a}]
decision_services: [{id: a, output_decisions: ["#a"]}]
""")
    
    def test_unknown_reference_rejected(self):
        with pytest.raises(DefinitionValidationError, match="unknown decision"):
            loads_definitions("""
id: dangling
decisions: [{id: a}]
decision_services: [{id: s, output_decisions: ["#missing"]}]
""")
    
    def test_cycle_rejected(self):
        with pytest.raises(DefinitionValidationError, match="Circular"):
            loads_definitions("""
id: cyclic
decisions:
  - {id: a, required_decisions: ["#b"]}
  - {id: b, required_decisions: ["#a"]}
""")
    
    def test_layered_requirements_validate_quickly(self):
        """Each decision requires both decisions of the layer below."""
        decisions = [Decision(id="L0a"), Decision(id="L0b")]
        for layer in range(1, 22):
            below = [f"#L{layer - 1}a", f"#L{layer - 1}b"]
            decisions.append(Decision(id=f"L{layer}a", required_decisions=below))
            decisions.append(Decision(id=f"L{layer}b", required_decisions=below))
        definitions = Definitions(id="layered", decisions=decisions)
        
        started = time.perf_counter()
        deployment = DecisionRepository().deploy(definitions)
        
        assert time.perf_counter() - started < 1.0
        assert deployment.definitions_id == "layered"
    
    def test_cycle_through_shared_requirement_rejected(self):
        definitions = Definitions(
            id="cyclic",
            decisions=[
                Decision(id="a", required_decisions=["#b", "#c"]),
                Decision(id="b", required_decisions=["#c"]),
                Decision(id="c", required_decisions=["#a"]),
            ],
        )
        
        with pytest.raises(DefinitionValidationError, match="Circular decision requirement detected"):
            definitions.validate_structure()
    
    def test_service_without_outputs_rejected(self):
        with pytest.raises(DefinitionValidationError):
            loads_definitions("""
id: empty
decisions: [{id: a}]
decision_services: [{id: s, output_decisions: []}]
""")
    
    def test_non_mapping_rejected(self):
        with pytest.raises(DefinitionValidationError):
            loads_definitions("- just\n- a list\n")


class TestDecisionRepository:
    
    def _definitions(self, name="v"):
        return Definitions(
            id="defs",
            name=name,
            decisions=[Decision(id="D1", name=name)],
            decision_services=[DecisionService(id="S1", output_decisions=["#D1"])],
        )
    
    def test_versions_increment(self):
        repository = DecisionRepository()
        repository.deploy(self._definitions("first"))
        repository.deploy(self._definitions("second"))
        
        deployed = repository.resolve("D1")
        
        assert deployed.version == 2
        assert deployed.element.name == "second"
        assert [v.version for v in repository.list_versions("D1")] == [1, 2]
    
    def test_parent_deployment_preferred(self):
        repository = DecisionRepository()
        first = repository.deploy(self._definitions("first"))
        repository.deploy(self._definitions("second"))
        
        deployed = repository.resolve("D1", parent_deployment_id=first.deployment_id)
        
        assert deployed.version == 1
        assert deployed.deployment_id == first.deployment_id
    
    def test_unknown_parent_deployment_falls_back_to_latest(self):
        repository = DecisionRepository()
        repository.deploy(self._definitions("first"))
        
        assert repository.resolve("D1", parent_deployment_id="nope").version == 1
    
    def test_tenant_isolation(self):
        repository = DecisionRepository()
        repository.deploy(self._definitions(), tenant_id="acme")
        
        assert repository.resolve("D1", tenant_id="acme").tenant_id == "acme"
        with pytest.raises(UnresolvedElementError):
            repository.resolve("D1")
        with pytest.raises(UnresolvedElementError):
            repository.resolve("D1", tenant_id="other")
    
    def test_default_tenant_fallback(self):
        repository = DecisionRepository()
        repository.deploy(self._definitions())
        
        with pytest.raises(UnresolvedElementError):
            repository.resolve("D1", tenant_id="acme")
        
        deployed = repository.resolve("D1", tenant_id="acme", fallback_to_default_tenant=True)
        assert deployed.tenant_id is None
    
    def test_deploy_validates(self):
        repository = DecisionRepository()
        broken = Definitions(
            id="broken",
            decisions=[Decision(id="a", required_decisions=["#ghost"])],
        )
        
        with pytest.raises(DefinitionValidationError):
            repository.deploy(broken)
        
        with pytest.raises(UnresolvedElementError):
            repository.resolve("a")
    
    def test_deployment_recorded(self):
        repository = DecisionRepository()
        deployment = repository.deploy(self._definitions("named"), tenant_id="acme")
        
        stored = repository.get_deployment(deployment.deployment_id)
        assert stored.definitions_id == "defs"
        assert stored.name == "named"
        assert stored.tenant_id == "acme"
