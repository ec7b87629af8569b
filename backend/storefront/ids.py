"""Typed identifiers shared by services and repositories."""
from typing import NewType

CategoryId = NewType("CategoryId", int)
MenuId = NewType("MenuId", int)
MenuScheduleId = NewType("MenuScheduleId", int)
ProductId = NewType("ProductId", int)
OptionGroupId = NewType("OptionGroupId", int)
OptionId = NewType("OptionId", int)
CartItemId = NewType("CartItemId", int)
CustomerId = NewType("CustomerId", int)
AddressId = NewType("AddressId", int)
OrderId = NewType("OrderId", str)
