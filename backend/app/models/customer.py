from sqlalchemy import Column, Integer, String
from sqlalchemy.orm import relationship
from app.db.base import Base

NAME_MAX_LENGTH = 200


class Customer(Base):
    __tablename__ = "customers"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(NAME_MAX_LENGTH), nullable=False)

    # Owned collection; images keep only the integer FK (no back-reference)
    images = relationship(
        "CustomerImage",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="CustomerImage.id",
    )
