"""
DMN Runtime - Engine

Wires repository, evaluator, history store, dispatcher and orchestrator.
"""

import logging
from pathlib import Path
from typing import Optional, Union

from .core.config import Settings, get_settings
from .core.logging import configure_logging
from .decision.commands import CommandContext, HistoryStore
from .decision.context import DecisionContextBuilder, ExecuteDecisionBuilder
from .decision.evaluator import DecisionEvaluator, DecisionHandler
from .decision.executor import CommandExecutor
from .decision.orchestrator import DecisionOrchestrator
from .history.store import InMemoryHistoryStore, SqlHistoryStore
from .model.elements import Definitions
from .model.loader import load_definitions
from .repository import DecisionRepository, Deployment

logger = logging.getLogger(__name__)


class DecisionEngine:
    """A configured decision runtime."""
    
    def __init__(
        self,
        settings: Optional[Settings] = None,
        repository: Optional[DecisionRepository] = None,
        evaluator: Optional[DecisionEvaluator] = None,
        history_store: Optional[HistoryStore] = None,
    ) -> None:
        self.settings = settings or get_settings()
        self.repository = repository or DecisionRepository()
        self.evaluator = evaluator or DecisionEvaluator()
        self.history_store = history_store or _create_history_store(self.settings)
        
        self.command_executor = CommandExecutor(CommandContext(
            evaluator=self.evaluator,
            history_store=self.history_store,
            settings=self.settings,
        ))
        self.decision_service = DecisionOrchestrator(
            DecisionContextBuilder(self.repository),
            self.command_executor,
        )
    
    def deploy(
        self,
        definitions: Definitions,
        tenant_id: Optional[str] = None,
        name: Optional[str] = None,
    ) -> Deployment:
        return self.repository.deploy(definitions, tenant_id=tenant_id, name=name)
    
    def deploy_file(self, path: Union[str, Path], tenant_id: Optional[str] = None) -> Deployment:
        return self.deploy(load_definitions(path), tenant_id=tenant_id)
    
    def register_handler(self, decision_id: str, handler: DecisionHandler) -> None:
        self.evaluator.register_handler(decision_id, handler)
    
    def decision_handler(self, decision_id: str):
        return self.evaluator.decision_handler(decision_id)
    
    def create_execute_decision_builder(self) -> ExecuteDecisionBuilder:
        return self.decision_service.create_execute_decision_builder()


def _create_history_store(settings: Settings) -> HistoryStore:
    if settings.HISTORY_STORE == "sql":
        logger.info("Using SQL history store")
        return SqlHistoryStore.from_url(settings.DATABASE_URL, echo=settings.DATABASE_ECHO)
    if settings.HISTORY_STORE != "memory":
        raise ValueError(f"Unknown history store: {settings.HISTORY_STORE}")
    return InMemoryHistoryStore()


def build_engine(settings: Optional[Settings] = None) -> DecisionEngine:
    """Create an engine from settings, configuring logging when asked to."""
    settings = settings or get_settings()
    if settings.CONFIGURE_LOGGING:
        configure_logging(settings.LOG_LEVEL)
    
    engine = DecisionEngine(settings=settings)
    logger.info(f"{settings.APP_NAME} engine ready (history: {settings.HISTORY_STORE})")
    return engine
