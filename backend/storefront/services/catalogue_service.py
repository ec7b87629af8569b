import logging
from typing import Dict, List, Optional

from sqlalchemy.orm import Session

from storefront.ids import CategoryId, OptionGroupId, OptionId, ProductId
from storefront.models.menu import Category
from storefront.models.product import OptionGroup, Product, ProductOption
from storefront.repositories.menu_repo import MenuRepository
from storefront.repositories.product_repo import ProductRepository
from storefront.schemas.product_schema import (
    CategoryIn,
    OptionGroupIn,
    OptionIn,
    ProductIn,
    cardinality_error,
)
from storefront.services.exceptions import InvalidInput, NotFound
from storefront.services.selection import Selection, SelectionResult, validate_selection

log = logging.getLogger(__name__)


def _build_group(data: OptionGroupIn) -> OptionGroup:
    group = OptionGroup(
        name=data.name,
        is_required=data.is_required,
        min_selections=data.min_selections,
        max_selections=data.max_selections,
        sort_order=data.sort_order,
    )
    for opt in data.options:
        group.options.append(ProductOption(**opt.model_dump()))
    return group


class CatalogueService:
    def __init__(self, db: Session):
        self.db = db
        self.repo = ProductRepository(db)

    # categories

    def list_categories(self) -> List[Category]:
        return self.repo.list_categories()

    def get_category(self, category_id: CategoryId) -> Category:
        c = self.repo.get_category(category_id)
        if not c:
            raise NotFound("Category", category_id)
        return c

    def _check_category_refs(self, slug: Optional[str], menu_id, category_id=None):
        if slug is not None:
            other = self.repo.get_category_by_slug(slug)
            if other and other.id != category_id:
                raise InvalidInput(f"Category slug already in use: {slug}")
        if menu_id is not None and not MenuRepository(self.db).get(menu_id):
            raise NotFound("Menu", menu_id)

    def create_category(self, data: CategoryIn) -> Category:
        self._check_category_refs(data.slug, data.menu_id)
        c = Category(**data.model_dump())
        self.db.add(c)
        self.db.commit()
        log.info("created category %s", c.slug)
        return c

    def update_category(self, category_id: CategoryId, changes: Dict) -> Category:
        c = self.get_category(category_id)
        self._check_category_refs(changes.get("slug"), changes.get("menu_id"), category_id)
        for key, value in changes.items():
            setattr(c, key, value)
        self.db.commit()
        log.info("updated category %s: %s", category_id, sorted(changes))
        return c

    def delete_category(self, category_id: CategoryId):
        c = self.get_category(category_id)
        if self.repo.category_has_products(category_id):
            raise InvalidInput(f"Category {category_id} still has products")
        self.db.delete(c)
        self.db.commit()
        log.info("deleted category %s", category_id)

    # products

    def list_products(
        self,
        q: Optional[str] = None,
        category_id: Optional[CategoryId] = None,
        popular: Optional[bool] = None,
        include_inactive: bool = False,
    ) -> List[Product]:
        return self.repo.list(
            q=q, category_id=category_id, popular=popular, active_only=not include_inactive
        )

    def get_product(self, product_id: ProductId, active_only: bool = False) -> Product:
        p = self.repo.get(product_id, active_only=active_only)
        if not p:
            raise NotFound("Product", product_id)
        return p

    def create_product(self, data: ProductIn) -> Product:
        self.get_category(data.category_id)
        fields = data.model_dump(exclude={"option_groups"})
        product = Product(**fields)
        for g in data.option_groups:
            product.option_groups.append(_build_group(g))
        self.repo.add(product)
        self.db.commit()
        log.info("created product %s (%s)", product.id, product.name)
        return product

    def update_product(self, product_id: ProductId, changes: Dict) -> Product:
        product = self.get_product(product_id)
        if changes.get("category_id") is not None:
            self.get_category(changes["category_id"])
        for key, value in changes.items():
            setattr(product, key, value)
        self.db.commit()
        log.info("updated product %s: %s", product_id, sorted(changes))
        return product

    def toggle_product_active(self, product_id: ProductId, is_active: bool) -> Product:
        product = self.get_product(product_id)
        product.is_active = is_active
        self.db.commit()
        log.info("product %s active=%s", product_id, is_active)
        return product

    def delete_product(self, product_id: ProductId):
        product = self.get_product(product_id)
        self.repo.delete(product)
        self.db.commit()
        log.info("deleted product %s", product_id)

    # option groups

    def get_option_group(self, group_id: OptionGroupId) -> OptionGroup:
        g = self.repo.get_group(group_id)
        if not g:
            raise NotFound("Option group", group_id)
        return g

    def create_option_group(self, product_id: ProductId, data: OptionGroupIn) -> OptionGroup:
        product = self.get_product(product_id)
        group = _build_group(data)
        product.option_groups.append(group)
        self.db.commit()
        return group

    def update_option_group(self, group_id: OptionGroupId, changes: Dict) -> OptionGroup:
        group = self.get_option_group(group_id)
        merged = {
            "is_required": group.is_required,
            "min_selections": group.min_selections,
            "max_selections": group.max_selections,
        }
        merged.update({k: v for k, v in changes.items() if k in merged})
        err = cardinality_error(**merged)
        if err:
            raise InvalidInput(err)
        for key, value in changes.items():
            setattr(group, key, value)
        self.db.commit()
        return group

    def delete_option_group(self, group_id: OptionGroupId):
        group = self.get_option_group(group_id)
        self.db.delete(group)
        self.db.commit()

    # options

    def get_option(self, option_id: OptionId) -> ProductOption:
        o = self.repo.get_option(option_id)
        if not o:
            raise NotFound("Option", option_id)
        return o

    def create_option(self, group_id: OptionGroupId, data: OptionIn) -> ProductOption:
        group = self.get_option_group(group_id)
        opt = ProductOption(**data.model_dump())
        group.options.append(opt)
        self.db.commit()
        return opt

    def update_option(self, option_id: OptionId, changes: Dict) -> ProductOption:
        opt = self.get_option(option_id)
        for key, value in changes.items():
            setattr(opt, key, value)
        self.db.commit()
        return opt

    def toggle_option_active(self, option_id: OptionId, is_active: bool) -> ProductOption:
        return self.update_option(option_id, {"is_active": is_active})

    def delete_option(self, option_id: OptionId):
        opt = self.get_option(option_id)
        self.db.delete(opt)
        self.db.commit()

    def check_selection(
        self, product_id: ProductId, selection: Selection
    ) -> SelectionResult:
        product = self.get_product(product_id, active_only=True)
        return validate_selection(product.option_groups, selection)
