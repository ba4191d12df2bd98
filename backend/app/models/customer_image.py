from sqlalchemy import Column, Integer, ForeignKey, Text
from app.db.base import Base


class CustomerImage(Base):
    __tablename__ = "customer_images"

    id = Column(Integer, primary_key=True, index=True)
    customer_id = Column(Integer, ForeignKey("customers.id", ondelete="CASCADE"), nullable=False, index=True)
    base64_data = Column(Text, nullable=False)  # original file bytes, base64 encoded
