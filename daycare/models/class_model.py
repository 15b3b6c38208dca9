from sqlalchemy import Column, Integer, String

from daycare.database import Base


class ClassModel(Base):
    """A class (반) of children sharing one room and one daily schedule."""

    __tablename__ = "classes"

    id = Column(Integer, primary_key=True)
    age = Column(String(50), nullable=False)
    class_name = Column(String(100), nullable=False)
