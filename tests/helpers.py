"""Test doubles and hand-built contexts."""

from dmn_runtime.decision.context import ExecuteDecisionContext, ExecutionRequest
from dmn_runtime.history.store import InMemoryHistoryStore
from dmn_runtime.model.elements import Decision, DecisionService, Definitions


class RecordingHistoryStore(InMemoryHistoryStore):
    """Counts every save attempt."""
    
    def __init__(self):
        super().__init__()
        self.attempts = 0
    
    def save(self, record):
        self.attempts += 1
        return super().save(record)


class FailingHistoryStore(RecordingHistoryStore):
    """Counts save attempts, then fails them."""
    
    def save(self, record):
        self.attempts += 1
        raise RuntimeError("history unavailable")


def make_context(element, definitions, container=None, **request_options) -> ExecuteDecisionContext:
    """Context built by hand, bypassing the repository."""
    request = ExecutionRequest(decision_key=element.id, **request_options)
    return ExecuteDecisionContext(
        request=request,
        element=element,
        definitions=definitions,
        deployment_id="deployment-1",
        version=1,
        variables=dict(request.variables),
        decision_execution=container,
    )


def pricing_definitions() -> Definitions:
    return Definitions(
        id="pricing",
        decisions=[
            Decision(id="D1", name="Double"),
            Decision(id="rows"),
            Decision(id="broken"),
        ],
    )


def pricing_handlers() -> dict:
    def broken(variables):
        raise ValueError("boom")
    
    return {
        "D1": lambda v: [{"y": v["x"] * 2}],
        "rows": lambda v: [{"i": i} for i in range(v["n"])],
        "broken": broken,
    }


def service_definitions() -> Definitions:
    return Definitions(
        id="services",
        decisions=[
            Decision(id="D1"),
            Decision(id="D2"),
            Decision(id="risk"),
            Decision(id="approval", required_decisions=["#risk"]),
        ],
        decision_services=[
            DecisionService(id="S1", output_decisions=["#D1", "#D2"]),
            DecisionService(
                id="loan",
                output_decisions=["#approval"],
                encapsulated_decisions=["#risk"],
            ),
        ],
    )


def service_handlers() -> dict:
    return {
        "D1": lambda v: [{"a": 1}],
        "D2": lambda v: [{"b": 2}],
        "risk": lambda v: {"level": "low" if v["score"] > 600 else "high"},
        "approval": lambda v: {"approved": v["level"] == "low"},
    }
