from typing import List, Optional

from sqlalchemy.orm import Session, selectinload

from storefront.ids import MenuId, MenuScheduleId
from storefront.models.menu import Menu, MenuSchedule


class MenuRepository:
    def __init__(self, db: Session):
        self.db = db

    def list(self, active_only: bool = False) -> List[Menu]:
        query = self.db.query(Menu).options(selectinload(Menu.schedules))
        if active_only:
            query = query.filter(Menu.is_active == True)
        return query.order_by(Menu.id).all()

    def get(self, menu_id: MenuId) -> Optional[Menu]:
        return self.db.query(Menu).filter(Menu.id == menu_id).first()

    def add(self, menu: Menu) -> Menu:
        self.db.add(menu)
        self.db.flush()
        return menu

    def get_schedule(self, schedule_id: MenuScheduleId) -> Optional[MenuSchedule]:
        return self.db.query(MenuSchedule).filter(MenuSchedule.id == schedule_id).first()
