"""
DMN Runtime - Definitions Loader

Reads definitions documents from YAML. Example::

    id: loan
    decisions:
      - id: risk
      - id: approval
        required_decisions: ["#risk"]
    decision_services:
      - id: loan_service
        output_decisions: ["#approval"]
        encapsulated_decisions: ["#risk"]
"""

import logging
from pathlib import Path
from typing import Any, Dict, Union

import yaml
from pydantic import ValidationError

from ..errors import DefinitionValidationError
from .elements import Definitions

logger = logging.getLogger(__name__)


def parse_definitions(data: Dict[str, Any]) -> Definitions:
    """Validate a raw mapping into a Definitions document."""
    if not isinstance(data, dict):
        raise DefinitionValidationError("Definitions document must be a mapping")
    
    try:
        definitions = Definitions.model_validate(data)
    except ValidationError as e:
        raise DefinitionValidationError(f"Invalid definitions document: {e}") from e
    
    definitions.validate_structure()
    return definitions


def load_definitions(source: Union[str, Path]) -> Definitions:
    """Load a definitions document from a YAML file."""
    path = Path(source)
    with open(path, "r") as f:
        data = yaml.safe_load(f)
    
    definitions = parse_definitions(data)
    logger.debug(
        f"Loaded definitions {definitions.id} from {path}: "
        f"{len(definitions.decisions)} decisions, "
        f"{len(definitions.decision_services)} decision services"
    )
    return definitions


def loads_definitions(text: str) -> Definitions:
    """Load a definitions document from a YAML string."""
    return parse_definitions(yaml.safe_load(text))
