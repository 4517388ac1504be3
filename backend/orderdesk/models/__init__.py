"""
OrderDesk Backend: ORM Models
===============================

Importing this package registers every table on `Base.metadata`.

    sys_account  ← Account   (system users, bcrypt password hash)
    dt_customer  ← Customer
    dt_order     ← Order     (customer_id → dt_customer.id, joined at read time)
"""

from orderdesk.models.account import Account
from orderdesk.models.customer import Customer
from orderdesk.models.order import Order

__all__ = ["Account", "Customer", "Order"]
