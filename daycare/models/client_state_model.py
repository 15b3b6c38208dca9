from sqlalchemy import JSON, Column, DateTime, String, func

from daycare.database import Base


class ClientStateModel(Base):
    """Key-value entries such as per-class schedule templates and the report basket."""

    __tablename__ = "client_state"

    key = Column(String(200), primary_key=True)
    value = Column(JSON, nullable=False)
    updated_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
