from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, Text, func

from daycare.database import Base


class DailyChildObservationModel(Base):
    __tablename__ = "daily_child_observations"

    id = Column(Integer, primary_key=True)
    class_id = Column(Integer, ForeignKey("classes.id"), nullable=False)
    date = Column(String(10), nullable=False, index=True)
    child_id = Column(Integer, ForeignKey("children.id"), nullable=False, index=True)
    observation = Column(Text, nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
