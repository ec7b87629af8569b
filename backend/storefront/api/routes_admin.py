from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from storefront.api.errors import to_http
from storefront.db import get_db
from storefront.schemas.customer_schema import CustomerOut
from storefront.schemas.order_schema import CancelIn, DashboardOut, OrderOut, StatusChangeIn
from storefront.schemas.product_schema import (
    ActiveToggleIn,
    CategoryIn,
    CategoryOut,
    CategoryUpdate,
    MenuCategoryIn,
    MenuIn,
    MenuOut,
    MenuScheduleIn,
    MenuScheduleOut,
    MenuUpdate,
    OptionGroupIn,
    OptionGroupOut,
    OptionGroupUpdate,
    OptionIn,
    OptionOut,
    OptionUpdate,
    ProductIn,
    ProductOut,
    ProductUpdate,
)
from storefront.services.catalogue_service import CatalogueService
from storefront.services.customer_service import CustomerService
from storefront.services.exceptions import StorefrontException
from storefront.services.menu_service import MenuService
from storefront.services.order_lifecycle import OrderStatus
from storefront.services.order_service import OrderService

router = APIRouter(prefix="/api/admin", tags=["admin"])


def _product(p) -> dict:
    return ProductOut.model_validate(p).model_dump()


def _order(o) -> dict:
    return OrderOut.model_validate(o).model_dump(mode="json")


# catalogue


@router.post("/categories", status_code=201, summary="Create category")
def create_category(payload: CategoryIn, db: Session = Depends(get_db)):
    try:
        c = CatalogueService(db).create_category(payload)
    except StorefrontException as e:
        raise to_http(e)
    return CategoryOut.model_validate(c).model_dump()


@router.patch("/categories/{category_id}", summary="Edit category")
def update_category(category_id: int, payload: CategoryUpdate, db: Session = Depends(get_db)):
    try:
        c = CatalogueService(db).update_category(category_id, payload.model_dump(exclude_unset=True))
    except StorefrontException as e:
        raise to_http(e)
    return CategoryOut.model_validate(c).model_dump()


@router.delete("/categories/{category_id}", status_code=204, summary="Delete empty category")
def delete_category(category_id: int, db: Session = Depends(get_db)):
    try:
        CatalogueService(db).delete_category(category_id)
    except StorefrontException as e:
        raise to_http(e)


# menus


@router.post("/menus", status_code=201, summary="Create menu with schedules")
def create_menu(payload: MenuIn, db: Session = Depends(get_db)):
    return MenuOut.model_validate(MenuService(db).create_menu(payload)).model_dump()


@router.patch("/menus/{menu_id}", summary="Edit menu")
def update_menu(menu_id: int, payload: MenuUpdate, db: Session = Depends(get_db)):
    try:
        m = MenuService(db).update_menu(menu_id, payload.model_dump(exclude_unset=True))
    except StorefrontException as e:
        raise to_http(e)
    return MenuOut.model_validate(m).model_dump()


@router.delete("/menus/{menu_id}", status_code=204, summary="Delete menu")
def delete_menu(menu_id: int, db: Session = Depends(get_db)):
    try:
        MenuService(db).delete_menu(menu_id)
    except StorefrontException as e:
        raise to_http(e)


@router.post("/menus/{menu_id}/schedules", status_code=201, summary="Add serving window")
def add_schedule(menu_id: int, payload: MenuScheduleIn, db: Session = Depends(get_db)):
    try:
        s = MenuService(db).add_schedule(menu_id, payload)
    except StorefrontException as e:
        raise to_http(e)
    return MenuScheduleOut.model_validate(s).model_dump()


@router.delete("/menu-schedules/{schedule_id}", status_code=204, summary="Remove serving window")
def remove_schedule(schedule_id: int, db: Session = Depends(get_db)):
    try:
        MenuService(db).remove_schedule(schedule_id)
    except StorefrontException as e:
        raise to_http(e)


@router.post("/menus/{menu_id}/categories", status_code=201, summary="Create category in menu")
def create_menu_category(menu_id: int, payload: MenuCategoryIn, db: Session = Depends(get_db)):
    try:
        c = MenuService(db).create_category(menu_id, payload)
    except StorefrontException as e:
        raise to_http(e)
    return CategoryOut.model_validate(c).model_dump()


@router.get("/products", summary="List all products, inactive included")
def list_products(
    q: Optional[str] = Query(None), category_id: Optional[int] = Query(None), db: Session = Depends(get_db)
):
    svc = CatalogueService(db)
    return [_product(p) for p in svc.list_products(q=q, category_id=category_id, include_inactive=True)]


@router.post("/products", status_code=201, summary="Create product")
def create_product(payload: ProductIn, db: Session = Depends(get_db)):
    try:
        return _product(CatalogueService(db).create_product(payload))
    except StorefrontException as e:
        raise to_http(e)


@router.get("/products/{product_id}", summary="Get product")
def get_product(product_id: int, db: Session = Depends(get_db)):
    try:
        return _product(CatalogueService(db).get_product(product_id))
    except StorefrontException as e:
        raise to_http(e)


@router.patch("/products/{product_id}", summary="Edit product")
def update_product(product_id: int, payload: ProductUpdate, db: Session = Depends(get_db)):
    try:
        p = CatalogueService(db).update_product(product_id, payload.model_dump(exclude_unset=True))
    except StorefrontException as e:
        raise to_http(e)
    return _product(p)


@router.post("/products/{product_id}/active", summary="Activate or deactivate product")
def toggle_product(product_id: int, payload: ActiveToggleIn, db: Session = Depends(get_db)):
    try:
        return _product(CatalogueService(db).toggle_product_active(product_id, payload.is_active))
    except StorefrontException as e:
        raise to_http(e)


@router.delete("/products/{product_id}", status_code=204, summary="Delete product")
def delete_product(product_id: int, db: Session = Depends(get_db)):
    try:
        CatalogueService(db).delete_product(product_id)
    except StorefrontException as e:
        raise to_http(e)


@router.post("/products/{product_id}/option-groups", status_code=201, summary="Add option group")
def create_option_group(product_id: int, payload: OptionGroupIn, db: Session = Depends(get_db)):
    try:
        g = CatalogueService(db).create_option_group(product_id, payload)
    except StorefrontException as e:
        raise to_http(e)
    return OptionGroupOut.model_validate(g).model_dump()


@router.patch("/option-groups/{group_id}", summary="Edit option group")
def update_option_group(group_id: int, payload: OptionGroupUpdate, db: Session = Depends(get_db)):
    try:
        g = CatalogueService(db).update_option_group(group_id, payload.model_dump(exclude_unset=True))
    except StorefrontException as e:
        raise to_http(e)
    return OptionGroupOut.model_validate(g).model_dump()


@router.delete("/option-groups/{group_id}", status_code=204, summary="Delete option group")
def delete_option_group(group_id: int, db: Session = Depends(get_db)):
    try:
        CatalogueService(db).delete_option_group(group_id)
    except StorefrontException as e:
        raise to_http(e)


@router.post("/option-groups/{group_id}/options", status_code=201, summary="Add option")
def create_option(group_id: int, payload: OptionIn, db: Session = Depends(get_db)):
    try:
        o = CatalogueService(db).create_option(group_id, payload)
    except StorefrontException as e:
        raise to_http(e)
    return OptionOut.model_validate(o).model_dump()


@router.patch("/options/{option_id}", summary="Edit option")
def update_option(option_id: int, payload: OptionUpdate, db: Session = Depends(get_db)):
    try:
        o = CatalogueService(db).update_option(option_id, payload.model_dump(exclude_unset=True))
    except StorefrontException as e:
        raise to_http(e)
    return OptionOut.model_validate(o).model_dump()


@router.post("/options/{option_id}/active", summary="Activate or deactivate option")
def toggle_option(option_id: int, payload: ActiveToggleIn, db: Session = Depends(get_db)):
    try:
        o = CatalogueService(db).toggle_option_active(option_id, payload.is_active)
    except StorefrontException as e:
        raise to_http(e)
    return OptionOut.model_validate(o).model_dump()


@router.delete("/options/{option_id}", status_code=204, summary="Delete option")
def delete_option(option_id: int, db: Session = Depends(get_db)):
    try:
        CatalogueService(db).delete_option(option_id)
    except StorefrontException as e:
        raise to_http(e)


# orders


@router.get("/orders", summary="List orders, newest first")
def list_orders(status: Optional[OrderStatus] = Query(None), db: Session = Depends(get_db)):
    return [_order(o) for o in OrderService(db).list_orders(status)]


@router.get("/orders/{order_id}", summary="Get order")
def get_order(order_id: str, db: Session = Depends(get_db)):
    try:
        return _order(OrderService(db).get_order(order_id))
    except StorefrontException as e:
        raise to_http(e)


@router.patch("/orders/{order_id}", summary="Advance order status")
def change_status(order_id: str, payload: StatusChangeIn, db: Session = Depends(get_db)):
    try:
        o = OrderService(db).change_status(
            order_id, payload.status, payload.note, payload.expected_version
        )
    except StorefrontException as e:
        raise to_http(e)
    return _order(o)


@router.post("/orders/{order_id}/cancel", summary="Cancel order")
def cancel_order(order_id: str, payload: CancelIn, db: Session = Depends(get_db)):
    try:
        o = OrderService(db).cancel_order(order_id, payload.reason, payload.expected_version)
    except StorefrontException as e:
        raise to_http(e)
    return _order(o)


# customers / dashboard


@router.get("/customers", summary="List customers")
def list_customers(db: Session = Depends(get_db)):
    return [CustomerOut.model_validate(c).model_dump() for c in CustomerService(db).list_customers()]


@router.get("/dashboard", response_model=DashboardOut, summary="Today's order figures")
def dashboard(db: Session = Depends(get_db)):
    return OrderService(db).dashboard_stats()
