from sqlalchemy import JSON, Column, DateTime, ForeignKey, Integer, String, func

from daycare.database import Base


class ActivityPlanModel(Base):
    """Monthly theme plan; ``plans`` holds the weekly breakdown as JSON."""

    __tablename__ = "activity_plans"

    id = Column(Integer, primary_key=True)
    class_id = Column(Integer, ForeignKey("classes.id"), nullable=False, index=True)
    theme = Column(String(200), nullable=False)
    start_date = Column(String(10), nullable=False)
    end_date = Column(String(10), nullable=False)
    age = Column(String(50), nullable=False)
    plans = Column(JSON, nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
