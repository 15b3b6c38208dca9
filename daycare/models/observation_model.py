from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    DateTime,
    ForeignKey,
    Integer,
    String,
    Text,
    func,
)

from daycare.database import Base


class ObservationModel(Base):
    """Free-form observation of a child in one developmental domain."""

    __tablename__ = "observations"

    id = Column(Integer, primary_key=True)
    child_id = Column(Integer, ForeignKey("children.id"), nullable=False, index=True)
    date = Column(String(10), nullable=False, index=True)
    time = Column(String(5), nullable=True)
    domain = Column(String(20), nullable=False)
    tags = Column(JSON, nullable=False)
    summary = Column(Text, nullable=False)
    detail = Column(Text, nullable=True)
    media = Column(JSON, nullable=False)
    author = Column(String(100), nullable=False)
    follow_ups = Column(JSON, nullable=False)
    linked_to_report = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
