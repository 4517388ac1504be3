# Services package init
"""
OrderDesk Backend: Services Layer
===================================

What:  Business logic layer sitting between routes (HTTP) and the database.
How:   Services receive an AsyncSession per call, issue their queries, and
       return pydantic response models or raise OrderDesk exceptions.

Service Inventory:
    - ResourceService (generic): search / get / delete + insert/update helpers
    - AccountService: account CRUD, password hashing, username lookup
    - CustomerService: customer CRUD
    - OrderService: order CRUD with the customer inner join
    - AuthService: register and login (token issuance)
"""
