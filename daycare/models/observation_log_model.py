from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, Text, func

from daycare.database import Base


class ObservationLogModel(Base):
    __tablename__ = "observation_logs"

    id = Column(Integer, primary_key=True)
    child_id = Column(Integer, ForeignKey("children.id"), nullable=False, index=True)
    month = Column(String(7), nullable=False)
    keywords = Column(Text, nullable=False)
    content = Column(Text, nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
