"""SQLAlchemy models mirroring the JSON document layout (collection -> records)."""
from __future__ import annotations

from sqlalchemy import (
    Column,
    DateTime,
    ForeignKey,
    Integer,
    String,
    JSON,
    func,
)
from sqlalchemy.orm import relationship

from .session import Base


class Collection(Base):
    __tablename__ = "collections"

    name = Column(String(128), primary_key=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    records = relationship("Record", back_populates="owner", cascade="all,delete-orphan")


class Record(Base):
    __tablename__ = "records"

    collection = Column(String(128), ForeignKey("collections.name", ondelete="CASCADE"), primary_key=True)
    # "id" is the public field name; the attribute is renamed to keep it off Python's builtin
    record_id = Column("id", Integer, primary_key=True, autoincrement=False)
    data = Column(JSON, nullable=False, default=dict)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    owner = relationship("Collection", back_populates="records")

    def to_dict(self) -> dict:
        record = {"id": self.record_id}
        record.update({k: v for k, v in (self.data or {}).items() if k != "id"})
        return record
