from sqlalchemy import Column, Integer, String, UniqueConstraint
from .db import Base


class Product(Base):
    __tablename__ = "products"
    __table_args__ = (UniqueConstraint("supermarket", "name"),)
    id = Column(Integer, primary_key=True, index=True)
    supermarket = Column(String(50), index=True, nullable=False)  # lowercase key
    name = Column(String(200), nullable=False)
    price = Column(String(50), nullable=False)  # currency-formatted, e.g. "€4.99"
    image = Column(String(500), nullable=False)
