"""
DMN Runtime - Historic Decision Execution Stores

InMemoryHistoryStore keeps records in a dict.
SqlHistoryStore persists them through SQLAlchemy.
"""

import json
import logging
import threading
import uuid
from datetime import datetime, timezone
from decimal import Decimal
from typing import Any, Callable, Dict, List, Optional

from sqlalchemy import create_engine, select
from sqlalchemy.orm import Session, sessionmaker

from .models import Base, HistoricDecisionExecution, HistoricDecisionExecutionRow

logger = logging.getLogger(__name__)

_EPOCH = datetime.min.replace(tzinfo=timezone.utc)


class HistoryJSONEncoder(json.JSONEncoder):
    """JSON encoder for audit payloads holding arbitrary row values."""
    def default(self, obj):
        if isinstance(obj, Decimal):
            return str(obj)
        if isinstance(obj, uuid.UUID):
            return str(obj)
        if isinstance(obj, datetime):
            return obj.isoformat()
        if isinstance(obj, (set, frozenset)):
            return list(obj)
        return super().default(obj)


def dump_execution(payload: Dict[str, Any]) -> str:
    return json.dumps(payload, cls=HistoryJSONEncoder)


def _sort_key(record: HistoricDecisionExecution) -> datetime:
    started = record.started_at
    if started is None:
        return _EPOCH
    if started.tzinfo is None:
        return started.replace(tzinfo=timezone.utc)
    return started


class InMemoryHistoryStore:
    """History store backed by a dict."""
    
    def __init__(self):
        self._records: Dict[str, HistoricDecisionExecution] = {}
        self._lock = threading.Lock()
    
    def save(self, record: HistoricDecisionExecution) -> str:
        with self._lock:
            self._records[record.id] = record
        logger.info(f"Saved historic execution {record.id} for {record.decision_key}")
        return record.id
    
    def get(self, record_id: str) -> Optional[HistoricDecisionExecution]:
        return self._records.get(record_id)
    
    def list(
        self,
        decision_key: Optional[str] = None,
        instance_id: Optional[str] = None,
        tenant_id: Optional[str] = None,
        failed: Optional[bool] = None,
        limit: int = 100,
    ) -> List[HistoricDecisionExecution]:
        """Records matching all given filters, newest first"""
        with self._lock:
            records = list(self._records.values())
        
        if decision_key is not None:
            records = [r for r in records if r.decision_key == decision_key]
        if instance_id is not None:
            records = [r for r in records if r.instance_id == instance_id]
        if tenant_id is not None:
            records = [r for r in records if r.tenant_id == tenant_id]
        if failed is not None:
            records = [r for r in records if r.failed == failed]
        
        records.sort(key=_sort_key, reverse=True)
        return records[:limit]


class SqlHistoryStore:
    """History store persisting to a SQL database."""
    
    def __init__(self, session_factory: Callable[[], Session]):
        self._session_factory = session_factory
    
    @classmethod
    def from_url(cls, database_url: str, echo: bool = False, create_tables: bool = True) -> "SqlHistoryStore":
        engine = create_engine(database_url, echo=echo)
        if create_tables:
            Base.metadata.create_all(bind=engine)
        return cls(sessionmaker(bind=engine, expire_on_commit=False))
    
    def save(self, record: HistoricDecisionExecution) -> str:
        with self._session_factory() as session:
            with session.begin():
                session.merge(HistoricDecisionExecutionRow(**record.model_dump()))
        logger.info(f"Persisted historic execution {record.id} for {record.decision_key}")
        return record.id
    
    def get(self, record_id: str) -> Optional[HistoricDecisionExecution]:
        with self._session_factory() as session:
            row = session.get(HistoricDecisionExecutionRow, record_id)
            return self._to_record(row) if row else None
    
    def list(
        self,
        decision_key: Optional[str] = None,
        instance_id: Optional[str] = None,
        tenant_id: Optional[str] = None,
        failed: Optional[bool] = None,
        limit: int = 100,
    ) -> List[HistoricDecisionExecution]:
        """Records matching all given filters, newest first"""
        query = select(HistoricDecisionExecutionRow)
        
        if decision_key is not None:
            query = query.where(HistoricDecisionExecutionRow.decision_key == decision_key)
        if instance_id is not None:
            query = query.where(HistoricDecisionExecutionRow.instance_id == instance_id)
        if tenant_id is not None:
            query = query.where(HistoricDecisionExecutionRow.tenant_id == tenant_id)
        if failed is not None:
            query = query.where(HistoricDecisionExecutionRow.failed == failed)
        
        query = query.order_by(HistoricDecisionExecutionRow.started_at.desc()).limit(limit)
        
        with self._session_factory() as session:
            return [self._to_record(row) for row in session.scalars(query)]
    
    @staticmethod
    def _to_record(row: HistoricDecisionExecutionRow) -> HistoricDecisionExecution:
        return HistoricDecisionExecution(
            id=row.id,
            decision_key=row.decision_key,
            decision_name=row.decision_name,
            decision_version=row.decision_version,
            deployment_id=row.deployment_id,
            decision_type=row.decision_type,
            tenant_id=row.tenant_id,
            instance_id=row.instance_id,
            execution_id=row.execution_id,
            activity_id=row.activity_id,
            scope_type=row.scope_type,
            started_at=row.started_at,
            ended_at=row.ended_at,
            failed=row.failed,
            execution_json=row.execution_json,
        )
