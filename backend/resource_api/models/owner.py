"""Owner ORM model."""

from sqlalchemy import Column, Integer, String
from sqlalchemy.orm import relationship

from resource_api.database import Base


class OwnerModel(Base):
    __tablename__ = "owners"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String, nullable=False)
    email = Column(String, unique=True)

    items = relationship("ItemModel", back_populates="owner")

    def __repr__(self) -> str:
        return f"<Owner id={self.id} name={self.name}>"
