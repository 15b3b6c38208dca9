from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, Text, func

from daycare.database import Base


class DevelopmentEvaluationModel(Base):
    """Periodic report; ``observations`` is the aggregated observation-log text."""

    __tablename__ = "development_evaluations"

    id = Column(Integer, primary_key=True)
    child_id = Column(Integer, ForeignKey("children.id"), nullable=False, index=True)
    period = Column(String(100), nullable=False)
    overall_characteristics = Column(Text, nullable=False)
    parent_message = Column(Text, nullable=False)
    observations = Column(Text, nullable=True)
    age_at_evaluation = Column(String(20), nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(DateTime(timezone=True), nullable=True)
