from sqlalchemy import JSON, Boolean, Column, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship

from storefront.db import Base


class Menu(Base):
    __tablename__ = "menus"
    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(128), nullable=False)
    description = Column(Text, nullable=True)
    is_active = Column(Boolean, default=True, nullable=False)

    schedules = relationship(
        "MenuSchedule", back_populates="menu", cascade="all, delete-orphan"
    )
    categories = relationship(
        "Category", back_populates="menu", order_by="Category.sort_order"
    )


class MenuSchedule(Base):
    __tablename__ = "menu_schedules"
    id = Column(Integer, primary_key=True, index=True)
    menu_id = Column(
        Integer, ForeignKey("menus.id", ondelete="CASCADE"), nullable=False, index=True
    )
    days_of_week = Column(JSON, nullable=False, default=list)  # 0=Sunday .. 6=Saturday
    start_time = Column(String(5), nullable=False)  # HH:MM
    end_time = Column(String(5), nullable=False)  # HH:MM

    menu = relationship("Menu", back_populates="schedules")


class Category(Base):
    __tablename__ = "categories"
    id = Column(Integer, primary_key=True, index=True)
    menu_id = Column(
        Integer, ForeignKey("menus.id", ondelete="SET NULL"), nullable=True, index=True
    )
    name = Column(String(128), nullable=False)
    icon = Column(String(64), nullable=True)
    slug = Column(String(128), unique=True, nullable=False, index=True)
    sort_order = Column(Integer, nullable=False, default=0)

    menu = relationship("Menu", back_populates="categories")
    products = relationship("Product", back_populates="category")

    def __repr__(self):
        return f"<Category slug={self.slug}>"
