from typing import List, Optional

from sqlalchemy.orm import Session, selectinload

from storefront.ids import CategoryId, MenuId, OptionGroupId, OptionId, ProductId
from storefront.models.menu import Category
from storefront.models.product import OptionGroup, Product, ProductOption


class ProductRepository:
    def __init__(self, db: Session):
        self.db = db

    def _with_options(self):
        return self.db.query(Product).options(
            selectinload(Product.option_groups).selectinload(OptionGroup.options)
        )

    def get(self, product_id: ProductId, active_only: bool = False) -> Optional[Product]:
        qry = self._with_options().filter(Product.id == product_id)
        if active_only:
            qry = qry.filter(Product.is_active == True)
        return qry.first()

    def list(
        self,
        q: Optional[str] = None,
        category_id: Optional[CategoryId] = None,
        popular: Optional[bool] = None,
        active_only: bool = True,
    ) -> List[Product]:
        query = self._with_options()
        if active_only:
            query = query.filter(Product.is_active == True)
        if category_id is not None:
            query = query.filter(Product.category_id == category_id)
        if popular is not None:
            query = query.filter(Product.is_popular == popular)
        if q:
            like = f"%{q}%"
            query = query.filter(
                (Product.name.ilike(like)) | (Product.description.ilike(like))
            )
        return query.order_by(Product.name).all()

    def add(self, product: Product) -> Product:
        self.db.add(product)
        self.db.flush()
        return product

    def delete(self, product: Product):
        self.db.delete(product)
        self.db.flush()

    # option groups / options

    def get_group(self, group_id: OptionGroupId) -> Optional[OptionGroup]:
        return self.db.query(OptionGroup).filter(OptionGroup.id == group_id).first()

    def get_option(self, option_id: OptionId) -> Optional[ProductOption]:
        return self.db.query(ProductOption).filter(ProductOption.id == option_id).first()

    # categories

    def list_categories(self, menu_id: Optional[MenuId] = None) -> List[Category]:
        query = self.db.query(Category)
        if menu_id is not None:
            query = query.filter(Category.menu_id == menu_id)
        return query.order_by(Category.sort_order, Category.id).all()

    def get_category(self, category_id: CategoryId) -> Optional[Category]:
        return self.db.query(Category).filter(Category.id == category_id).first()

    def get_category_by_slug(self, slug: str) -> Optional[Category]:
        return self.db.query(Category).filter(Category.slug == slug).first()

    def category_has_products(self, category_id: CategoryId) -> bool:
        return (
            self.db.query(Product.id).filter(Product.category_id == category_id).first()
            is not None
        )
