from .elements import (
    Decision,
    DecisionModelElement,
    DecisionService,
    Definitions,
    ElementReference,
)
from .loader import load_definitions, loads_definitions, parse_definitions

__all__ = [
    "Decision",
    "DecisionModelElement",
    "DecisionService",
    "Definitions",
    "ElementReference",
    "load_definitions",
    "loads_definitions",
    "parse_definitions",
]
