"""Item ORM model."""

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Integer, String, func
from sqlalchemy.orm import relationship

from resource_api.database import Base


class ItemModel(Base):
    __tablename__ = "items"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String, nullable=False, index=True)
    age = Column(Integer)
    tag = Column(String)
    active = Column(Boolean, default=True)
    created_at = Column(DateTime, server_default=func.now())

    owner_id = Column(Integer, ForeignKey("owners.id"), index=True)
    owner = relationship("OwnerModel", back_populates="items")

    def __repr__(self) -> str:
        return f"<Item id={self.id} name={self.name}>"
