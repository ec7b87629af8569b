from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, field_validator

from storefront.schemas.validators import reject_null


class CustomerIn(BaseModel):
    name: str
    phone: str
    email: Optional[str] = None


class CustomerUpdate(BaseModel):
    name: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None

    @field_validator("name", "phone")
    @classmethod
    def _not_null(cls, value):
        return reject_null(value)


class AddressIn(BaseModel):
    label: str = "Casa"
    street: str
    number: str
    complement: Optional[str] = None
    neighborhood: str
    city: str
    state: str
    zip_code: Optional[str] = None
    is_default: bool = False


class AddressOut(AddressIn):
    model_config = ConfigDict(from_attributes=True)
    id: int
    customer_id: int


class CustomerOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    id: int
    name: str
    phone: str
    email: Optional[str] = None
    created_at: Optional[datetime] = None
    addresses: List[AddressOut] = []


class AddressUpdate(BaseModel):
    # the default flag only changes through set-default
    label: Optional[str] = None
    street: Optional[str] = None
    number: Optional[str] = None
    complement: Optional[str] = None
    neighborhood: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    zip_code: Optional[str] = None

    @field_validator("label", "street", "number", "neighborhood", "city", "state")
    @classmethod
    def _not_null(cls, value):
        return reject_null(value)
