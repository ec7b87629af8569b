from typing import Dict, List, Optional

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel
from sqlalchemy.orm import Session

from storefront.api.errors import to_http
from storefront.db import get_db
from storefront.schemas.product_schema import CategoryOut, MenuOut, ProductOut
from storefront.services.catalogue_service import CatalogueService
from storefront.services.exceptions import StorefrontException
from storefront.services.menu_service import MenuService
from storefront.services.selection import SelectionResult

router = APIRouter(prefix="/api", tags=["catalogue"])


class SelectionIn(BaseModel):
    selection: Dict[int, List[int]] = {}


def _storefront_view(p) -> dict:
    """Product as customers see it: inactive options hidden."""
    data = ProductOut.model_validate(p).model_dump()
    for g in data["option_groups"]:
        g["options"] = [o for o in g["options"] if o["is_active"]]
    return data


@router.get("/categories", summary="List categories")
def list_categories(db: Session = Depends(get_db)):
    svc = CatalogueService(db)
    return [CategoryOut.model_validate(c).model_dump() for c in svc.list_categories()]


@router.get("/categories/{category_id}/products", summary="Products of a category")
def category_products(category_id: int, db: Session = Depends(get_db)):
    svc = CatalogueService(db)
    try:
        svc.get_category(category_id)
    except StorefrontException as e:
        raise to_http(e)
    return [_storefront_view(p) for p in svc.list_products(category_id=category_id)]


@router.get("/products", summary="List products")
def list_products(
    q: Optional[str] = Query(None, description="search term"),
    category_id: Optional[int] = Query(None),
    popular: Optional[bool] = Query(None),
    db: Session = Depends(get_db),
):
    svc = CatalogueService(db)
    items = svc.list_products(q=q, category_id=category_id, popular=popular)
    return {"items": [_storefront_view(p) for p in items], "total": len(items)}


@router.get("/products/{product_id}", summary="Get product with its option groups")
def get_product(product_id: int, db: Session = Depends(get_db)):
    svc = CatalogueService(db)
    try:
        return _storefront_view(svc.get_product(product_id, active_only=True))
    except StorefrontException as e:
        raise to_http(e)


@router.post(
    "/products/{product_id}/validate-selection",
    response_model=SelectionResult,
    summary="Check an option selection before adding to cart",
)
def validate_selection(product_id: int, payload: SelectionIn, db: Session = Depends(get_db)):
    svc = CatalogueService(db)
    try:
        return svc.check_selection(product_id, payload.selection)
    except StorefrontException as e:
        raise to_http(e)


@router.get("/menus", summary="List menus")
def list_menus(db: Session = Depends(get_db)):
    return [MenuOut.model_validate(m).model_dump() for m in MenuService(db).list_menus()]


@router.get("/menus/active", summary="Menus served right now")
def active_menus(db: Session = Depends(get_db)):
    return [MenuOut.model_validate(m).model_dump() for m in MenuService(db).active_menus()]


@router.get("/menus/{menu_id}/categories", summary="Categories of a menu")
def menu_categories(menu_id: int, db: Session = Depends(get_db)):
    try:
        cats = MenuService(db).categories(menu_id)
    except StorefrontException as e:
        raise to_http(e)
    return [CategoryOut.model_validate(c).model_dump() for c in cats]
