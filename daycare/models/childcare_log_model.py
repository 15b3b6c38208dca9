from sqlalchemy import (
    JSON,
    Column,
    DateTime,
    ForeignKey,
    Integer,
    String,
    Text,
    UniqueConstraint,
    func,
)

from daycare.database import Base


class ChildcareLogModel(Base):
    """One daily log per class and date; ``schedule`` is the ordered row list."""

    __tablename__ = "childcare_logs"
    __table_args__ = (
        UniqueConstraint("class_id", "date", name="uq_childcare_logs_class_date"),
    )

    id = Column(Integer, primary_key=True)
    class_id = Column(Integer, ForeignKey("classes.id"), nullable=False)
    date = Column(String(10), nullable=False)
    keywords = Column(Text, nullable=False, default="")
    evaluation = Column(Text, nullable=False, default="")
    support_plan = Column(Text, nullable=False, default="")
    schedule = Column(JSON, nullable=True)
    evaluation_content = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
