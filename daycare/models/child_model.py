from sqlalchemy import Column, ForeignKey, Integer, String

from daycare.database import Base


class ChildModel(Base):
    __tablename__ = "children"

    id = Column(Integer, primary_key=True)
    name = Column(String(100), nullable=False)
    birthdate = Column(String(10), nullable=False)
    class_id = Column(Integer, ForeignKey("classes.id"), nullable=False, index=True)
