"""
DMN Runtime - Historic Decision Execution Models

The pydantic record handed to stores, and its SQLAlchemy table.
"""

import uuid
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field
from sqlalchemy import Boolean, DateTime, Index, Integer, String, Text
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class HistoricDecisionExecution(BaseModel):
    """Durable record of one decision or decision service execution."""
    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    decision_key: str
    decision_name: Optional[str] = None
    decision_version: Optional[int] = None
    deployment_id: Optional[str] = None
    decision_type: str = "decision"  # decision | decision_service
    tenant_id: Optional[str] = None
    
    # Correlation
    instance_id: Optional[str] = None
    execution_id: Optional[str] = None
    activity_id: Optional[str] = None
    scope_type: Optional[str] = None
    
    started_at: Optional[datetime] = None
    ended_at: Optional[datetime] = None
    failed: bool = False
    
    # Serialized audit container
    execution_json: str = "{}"


class Base(DeclarativeBase):
    """Base class for history ORM models."""
    pass


class HistoricDecisionExecutionRow(Base):
    """Persisted historic decision execution."""
    
    __tablename__ = "decision_history"
    
    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    decision_key: Mapped[str] = mapped_column(String(255), nullable=False)
    decision_name: Mapped[Optional[str]] = mapped_column(String(255))
    decision_version: Mapped[Optional[int]] = mapped_column(Integer)
    deployment_id: Mapped[Optional[str]] = mapped_column(String(36))
    decision_type: Mapped[str] = mapped_column(String(32), nullable=False, default="decision")
    tenant_id: Mapped[Optional[str]] = mapped_column(String(255))
    instance_id: Mapped[Optional[str]] = mapped_column(String(255))
    execution_id: Mapped[Optional[str]] = mapped_column(String(255))
    activity_id: Mapped[Optional[str]] = mapped_column(String(255))
    scope_type: Mapped[Optional[str]] = mapped_column(String(64))
    started_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True))
    ended_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True))
    failed: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    execution_json: Mapped[str] = mapped_column(Text, nullable=False, default="{}")
    
    __table_args__ = (
        Index("idx_decision_history_key", "decision_key"),
        Index("idx_decision_history_instance", "instance_id"),
    )
