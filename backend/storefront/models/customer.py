from datetime import datetime, timezone

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Integer, String
from sqlalchemy.orm import relationship

from storefront.db import Base


class Customer(Base):
    __tablename__ = "customers"
    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(256), nullable=False)
    phone = Column(String(32), nullable=False, index=True)
    email = Column(String(256), nullable=True, index=True)
    created_at = Column(DateTime, default=lambda: datetime.now(timezone.utc))

    addresses = relationship(
        "Address",
        back_populates="customer",
        cascade="all, delete-orphan",
        order_by="Address.id",
    )

    @property
    def default_address(self):
        return next((a for a in self.addresses if a.is_default), None)


class Address(Base):
    __tablename__ = "addresses"
    id = Column(Integer, primary_key=True, index=True)
    customer_id = Column(
        Integer, ForeignKey("customers.id", ondelete="CASCADE"), nullable=False, index=True
    )
    label = Column(String(64), nullable=False, default="Casa")
    street = Column(String(256), nullable=False)
    number = Column(String(32), nullable=False)
    complement = Column(String(128), nullable=True)
    neighborhood = Column(String(128), nullable=False)
    city = Column(String(128), nullable=False)
    state = Column(String(64), nullable=False)
    zip_code = Column(String(16), nullable=True)
    is_default = Column(Boolean, default=False, nullable=False)

    customer = relationship("Customer", back_populates="addresses")

    def snapshot(self) -> dict:
        """Plain copy of the address, detached from the row."""
        return {
            "id": self.id,
            "customer_id": self.customer_id,
            "label": self.label,
            "street": self.street,
            "number": self.number,
            "complement": self.complement,
            "neighborhood": self.neighborhood,
            "city": self.city,
            "state": self.state,
            "zip_code": self.zip_code,
            "is_default": self.is_default,
        }
