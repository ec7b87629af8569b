from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from storefront.schemas.validators import reject_null


def cardinality_error(is_required: bool, min_selections: int, max_selections: int) -> Optional[str]:
    """Return why an option group's selection bounds are inconsistent, or None."""
    if min_selections < 0:
        return "min_selections must be >= 0"
    if max_selections < 1:
        return "max_selections must be >= 1"
    if min_selections > max_selections:
        return "min_selections must not exceed max_selections"
    if is_required and min_selections < 1:
        return "required groups need min_selections >= 1"
    return None


class CategoryIn(BaseModel):
    name: str
    slug: str
    icon: Optional[str] = None
    sort_order: int = 0
    menu_id: Optional[int] = None


class CategoryUpdate(BaseModel):
    name: Optional[str] = None
    slug: Optional[str] = None
    icon: Optional[str] = None
    sort_order: Optional[int] = None
    # null detaches the category from its menu
    menu_id: Optional[int] = None

    @field_validator("name", "slug", "sort_order")
    @classmethod
    def _not_null(cls, value):
        return reject_null(value)


class CategoryOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    id: int
    menu_id: Optional[int] = None
    name: str
    slug: str
    icon: Optional[str] = None
    sort_order: int


class OptionIn(BaseModel):
    name: str
    extra_price_cents: int = Field(0, ge=0)
    is_active: bool = True
    sort_order: int = 0


class OptionUpdate(BaseModel):
    name: Optional[str] = None
    extra_price_cents: Optional[int] = Field(None, ge=0)
    is_active: Optional[bool] = None
    sort_order: Optional[int] = None

    @field_validator("name", "extra_price_cents", "is_active", "sort_order")
    @classmethod
    def _not_null(cls, value):
        return reject_null(value)


class OptionOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    id: int
    group_id: int
    name: str
    extra_price_cents: int
    is_active: bool
    sort_order: int


class OptionGroupIn(BaseModel):
    name: str
    is_required: bool = False
    min_selections: int = 0
    max_selections: int = 1
    sort_order: int = 0
    options: List[OptionIn] = []

    @model_validator(mode="after")
    def _check_bounds(self):
        err = cardinality_error(self.is_required, self.min_selections, self.max_selections)
        if err:
            raise ValueError(err)
        return self


class OptionGroupUpdate(BaseModel):
    name: Optional[str] = None
    is_required: Optional[bool] = None
    min_selections: Optional[int] = None
    max_selections: Optional[int] = None
    sort_order: Optional[int] = None

    @field_validator(
        "name", "is_required", "min_selections", "max_selections", "sort_order"
    )
    @classmethod
    def _not_null(cls, value):
        return reject_null(value)


class OptionGroupOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    id: int
    product_id: int
    name: str
    is_required: bool
    min_selections: int
    max_selections: int
    sort_order: int
    options: List[OptionOut] = []


class ProductIn(BaseModel):
    category_id: int
    name: str
    description: Optional[str] = None
    price_cents: int = Field(..., ge=0)
    image: Optional[str] = None
    is_active: bool = True
    is_popular: bool = False
    preparation_time: int = Field(0, ge=0)
    option_groups: List[OptionGroupIn] = []


class ProductUpdate(BaseModel):
    category_id: Optional[int] = None
    name: Optional[str] = None
    description: Optional[str] = None
    price_cents: Optional[int] = Field(None, ge=0)
    image: Optional[str] = None
    is_popular: Optional[bool] = None
    preparation_time: Optional[int] = Field(None, ge=0)

    @field_validator(
        "category_id", "name", "price_cents", "is_popular", "preparation_time"
    )
    @classmethod
    def _not_null(cls, value):
        return reject_null(value)


class ActiveToggleIn(BaseModel):
    is_active: bool


class ProductOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    id: int
    category_id: int
    name: str
    description: Optional[str] = None
    price_cents: int
    image: Optional[str] = None
    is_active: bool
    is_popular: bool
    preparation_time: int
    option_groups: List[OptionGroupOut] = []


HHMM = r"^([01]\d|2[0-3]):[0-5]\d$"


class MenuScheduleIn(BaseModel):
    # 0=Sunday .. 6=Saturday
    days_of_week: List[int] = Field(..., min_length=1)
    start_time: str = Field(..., pattern=HHMM)
    end_time: str = Field(..., pattern=HHMM)

    @field_validator("days_of_week")
    @classmethod
    def _check_days(cls, days):
        if any(d < 0 or d > 6 for d in days):
            raise ValueError("days_of_week entries must be between 0 (Sunday) and 6")
        return sorted(set(days))

    @model_validator(mode="after")
    def _check_window(self):
        if self.start_time > self.end_time:
            raise ValueError("start_time must not be after end_time")
        return self


class MenuScheduleOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    id: int
    days_of_week: List[int]
    start_time: str
    end_time: str


class MenuOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    id: int
    name: str
    description: Optional[str] = None
    is_active: bool
    schedules: List[MenuScheduleOut] = []


class MenuIn(BaseModel):
    name: str
    description: Optional[str] = None
    is_active: bool = True
    schedules: List[MenuScheduleIn] = []


class MenuUpdate(BaseModel):
    name: Optional[str] = None
    description: Optional[str] = None
    is_active: Optional[bool] = None

    @field_validator("name", "is_active")
    @classmethod
    def _not_null(cls, value):
        return reject_null(value)


class MenuCategoryIn(BaseModel):
    name: str
    slug: str
    icon: Optional[str] = None
    sort_order: int = 0
