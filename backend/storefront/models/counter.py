from sqlalchemy import Column, Integer, String

from storefront.db import Base


class OrderCounter(Base):
    """Persisted sequence backing human-readable order codes."""

    __tablename__ = "order_counters"
    name = Column(String(32), primary_key=True)
    value = Column(Integer, nullable=False, default=0)
