# import every model module so relationship targets resolve on first use
from storefront.models import cart, counter, customer, menu, order, product  # noqa: F401
