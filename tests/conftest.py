"""
Shared fixtures: engines over small definitions documents, with history
stores that record persistence attempts.
"""

import pytest

from dmn_runtime.core.config import Settings
from dmn_runtime.engine import DecisionEngine

from tests.helpers import (
    FailingHistoryStore,
    RecordingHistoryStore,
    pricing_definitions,
    pricing_handlers,
    service_definitions,
    service_handlers,
)


@pytest.fixture
def settings():
    return Settings(_env_file=None, HISTORY_ENABLED=True, HISTORY_STORE="memory")


@pytest.fixture
def make_engine(settings):
    def _make(definitions, handlers, history_store=None, engine_settings=None):
        engine = DecisionEngine(
            settings=engine_settings or settings,
            history_store=history_store if history_store is not None else RecordingHistoryStore(),
        )
        for decision_id, handler in handlers.items():
            engine.register_handler(decision_id, handler)
        engine.deploy(definitions)
        return engine
    
    return _make


@pytest.fixture
def pricing_engine(make_engine):
    return make_engine(pricing_definitions(), pricing_handlers())


@pytest.fixture
def service_engine(make_engine):
    return make_engine(service_definitions(), service_handlers())


@pytest.fixture
def failing_pricing_engine(make_engine):
    return make_engine(pricing_definitions(), pricing_handlers(), history_store=FailingHistoryStore())
