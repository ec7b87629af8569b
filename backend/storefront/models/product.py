from sqlalchemy import Boolean, Column, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship

from storefront.db import Base


class Product(Base):
    __tablename__ = "products"

    id = Column(Integer, primary_key=True, index=True)
    category_id = Column(
        Integer, ForeignKey("categories.id"), nullable=False, index=True
    )
    name = Column(String(256), nullable=False)
    description = Column(Text, nullable=True)
    price_cents = Column(Integer, nullable=False, default=0)
    image = Column(String(512), nullable=True)
    is_active = Column(Boolean, default=True, nullable=False)
    is_popular = Column(Boolean, default=False, nullable=False)
    preparation_time = Column(Integer, nullable=False, default=0)  # minutes

    category = relationship("Category", back_populates="products")
    option_groups = relationship(
        "OptionGroup",
        back_populates="product",
        cascade="all, delete-orphan",
        order_by="OptionGroup.sort_order, OptionGroup.id",
    )

    def __repr__(self):
        return f"<Product id={self.id} name={self.name}>"


class OptionGroup(Base):
    __tablename__ = "option_groups"

    id = Column(Integer, primary_key=True, index=True)
    product_id = Column(
        Integer, ForeignKey("products.id", ondelete="CASCADE"), nullable=False, index=True
    )
    name = Column(String(128), nullable=False)
    is_required = Column(Boolean, default=False, nullable=False)
    min_selections = Column(Integer, nullable=False, default=0)
    max_selections = Column(Integer, nullable=False, default=1)
    sort_order = Column(Integer, nullable=False, default=0)

    product = relationship("Product", back_populates="option_groups")
    options = relationship(
        "ProductOption",
        back_populates="group",
        cascade="all, delete-orphan",
        order_by="ProductOption.sort_order, ProductOption.id",
    )


class ProductOption(Base):
    __tablename__ = "product_options"

    id = Column(Integer, primary_key=True, index=True)
    group_id = Column(
        Integer,
        ForeignKey("option_groups.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    name = Column(String(128), nullable=False)
    extra_price_cents = Column(Integer, nullable=False, default=0)
    is_active = Column(Boolean, default=True, nullable=False)
    sort_order = Column(Integer, nullable=False, default=0)

    group = relationship("OptionGroup", back_populates="options")
