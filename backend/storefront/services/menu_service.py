import logging
from datetime import datetime
from typing import Dict, List, Optional

from sqlalchemy.orm import Session

from storefront.ids import MenuId, MenuScheduleId
from storefront.models.menu import Category, Menu, MenuSchedule
from storefront.repositories.menu_repo import MenuRepository
from storefront.repositories.product_repo import ProductRepository
from storefront.schemas.product_schema import MenuCategoryIn, MenuIn, MenuScheduleIn
from storefront.services.exceptions import InvalidInput, NotFound

log = logging.getLogger(__name__)


def js_weekday(moment: datetime) -> int:
    """Day of week with 0=Sunday, the convention stored in schedules."""
    return (moment.weekday() + 1) % 7


def schedule_is_open(schedule: MenuSchedule, now: datetime) -> bool:
    if js_weekday(now) not in (schedule.days_of_week or []):
        return False
    hhmm = now.strftime("%H:%M")
    return schedule.start_time <= hhmm <= schedule.end_time


def _build_schedule(data: MenuScheduleIn) -> MenuSchedule:
    return MenuSchedule(
        days_of_week=list(data.days_of_week),
        start_time=data.start_time,
        end_time=data.end_time,
    )


class MenuService:
    def __init__(self, db: Session):
        self.db = db
        self.repo = MenuRepository(db)
        self.product_repo = ProductRepository(db)

    def list_menus(self) -> List[Menu]:
        return self.repo.list()

    def get_menu(self, menu_id: MenuId) -> Menu:
        m = self.repo.get(menu_id)
        if not m:
            raise NotFound("Menu", menu_id)
        return m

    def categories(self, menu_id: MenuId) -> List[Category]:
        self.get_menu(menu_id)
        return self.product_repo.list_categories(menu_id=menu_id)

    def active_menus(self, now: Optional[datetime] = None) -> List[Menu]:
        now = now or datetime.now()
        return [
            m
            for m in self.repo.list(active_only=True)
            if any(schedule_is_open(s, now) for s in m.schedules)
        ]

    # admin

    def create_menu(self, data: MenuIn) -> Menu:
        menu = Menu(name=data.name, description=data.description, is_active=data.is_active)
        menu.schedules = [_build_schedule(s) for s in data.schedules]
        self.repo.add(menu)
        self.db.commit()
        log.info("created menu %s (%s)", menu.id, menu.name)
        return menu

    def update_menu(self, menu_id: MenuId, changes: Dict) -> Menu:
        menu = self.get_menu(menu_id)
        for key, value in changes.items():
            setattr(menu, key, value)
        self.db.commit()
        log.info("updated menu %s: %s", menu_id, sorted(changes))
        return menu

    def delete_menu(self, menu_id: MenuId):
        """Delete a menu and its schedules; its categories stay, detached."""
        menu = self.get_menu(menu_id)
        for c in list(menu.categories):
            c.menu_id = None
        self.db.delete(menu)
        self.db.commit()
        log.info("deleted menu %s", menu_id)

    def add_schedule(self, menu_id: MenuId, data: MenuScheduleIn) -> MenuSchedule:
        menu = self.get_menu(menu_id)
        schedule = _build_schedule(data)
        menu.schedules.append(schedule)
        self.db.commit()
        return schedule

    def remove_schedule(self, schedule_id: MenuScheduleId):
        schedule = self.repo.get_schedule(schedule_id)
        if not schedule:
            raise NotFound("Menu schedule", schedule_id)
        self.db.delete(schedule)
        self.db.commit()

    def create_category(self, menu_id: MenuId, data: MenuCategoryIn) -> Category:
        self.get_menu(menu_id)
        if self.product_repo.get_category_by_slug(data.slug):
            raise InvalidInput(f"Category slug already in use: {data.slug}")
        c = Category(menu_id=menu_id, **data.model_dump())
        self.db.add(c)
        self.db.commit()
        log.info("created category %s in menu %s", c.slug, menu_id)
        return c
