"""
OrderDesk Backend: Resource Service Tests
===========================================

What:  AccountService, CustomerService and OrderService against a real
       (in-memory SQLite) database.

What we test:
    ✅ Create / get / update / delete for each kind
    ✅ NotFound on get, update and delete of unknown ids, for all three kinds
    ✅ Case-insensitive substring search, pagination envelope, id ordering
    ✅ Order reads embed the customer's name and phone
    ✅ Orders of a deleted customer disappear from reads and counts
    ✅ Orders must reference an existing customer
    ✅ Account passwords are stored hashed; duplicate usernames are rejected
"""

import pytest

from orderdesk.exceptions import (
    HashingError,
    NotFoundError,
    PersistenceError,
    ValidationError,
)
from orderdesk.pagination import PageRequest
from orderdesk.schemas.account import AccountCreate, AccountUpdate
from orderdesk.schemas.customer import CustomerCreate, CustomerUpdate
from orderdesk.schemas.order import OrderCreate, OrderUpdate
from orderdesk.security import verify_password
from orderdesk.services.account_service import account_service
from orderdesk.services.customer_service import customer_service
from orderdesk.services.order_service import order_service


async def make_customer(db, name="Acme", phone="555-0100"):
    return await customer_service.create(db, CustomerCreate(name=name, phone=phone))


class TestOrderScenario:
    @pytest.mark.asyncio
    async def test_order_read_embeds_customer(self, db_session):
        """Customer Acme → order for Cleaning → read shows both."""
        customer = await make_customer(db_session)
        assert customer.id == 1

        order = await order_service.create(
            db_session,
            OrderCreate(customer_id=1, service="Cleaning", amount=2, unit="hours", price=50),
        )
        assert order.id == 1

        fetched = await order_service.get(db_session, 1)
        assert fetched.model_dump(exclude={"created_at"}) == {
            "id": 1,
            "customer_id": 1,
            "name": "Acme",
            "phone": "555-0100",
            "service": "Cleaning",
            "amount": 2,
            "unit": "hours",
            "price": 50,
        }
        assert fetched.created_at is not None


class TestNotFound:
    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "service,resource",
        [(account_service, "Account"), (customer_service, "Customer"), (order_service, "Order")],
    )
    async def test_get_unknown_id(self, db_session, service, resource):
        with pytest.raises(NotFoundError) as exc_info:
            await service.get(db_session, 999)
        assert exc_info.value.message == f"{resource} with id [999] not found"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("service", [account_service, customer_service, order_service])
    async def test_delete_unknown_id(self, db_session, service):
        with pytest.raises(NotFoundError):
            await service.delete(db_session, 999)

    @pytest.mark.asyncio
    async def test_update_unknown_customer(self, db_session):
        with pytest.raises(NotFoundError):
            await customer_service.update(db_session, 42, CustomerUpdate(name="x"))

    @pytest.mark.asyncio
    async def test_update_unknown_account(self, db_session):
        with pytest.raises(NotFoundError):
            await account_service.update(db_session, 42, AccountUpdate(password="pw"))

    @pytest.mark.asyncio
    async def test_update_unknown_order(self, db_session):
        await make_customer(db_session)
        with pytest.raises(NotFoundError):
            await order_service.update(db_session, 42, OrderUpdate(customer_id=1))


class TestCustomerService:
    @pytest.mark.asyncio
    async def test_update_replaces_fields(self, db_session):
        customer = await make_customer(db_session)
        await customer_service.update(
            db_session, customer.id, CustomerUpdate(name="Acme Ltd", phone="555-0111")
        )
        fetched = await customer_service.get(db_session, customer.id)
        assert (fetched.name, fetched.phone) == ("Acme Ltd", "555-0111")

    @pytest.mark.asyncio
    async def test_delete_then_get(self, db_session):
        customer = await make_customer(db_session)
        await customer_service.delete(db_session, customer.id)
        with pytest.raises(NotFoundError):
            await customer_service.get(db_session, customer.id)

    @pytest.mark.asyncio
    async def test_search_is_case_insensitive_substring(self, db_session):
        for name in ["John Smith", "Mary Jones", "Bob Johnson", "Alice"]:
            await make_customer(db_session, name=name)

        page = await customer_service.search(db_session, PageRequest(search="JO"))
        assert [c.name for c in page.data] == ["John Smith", "Mary Jones", "Bob Johnson"]
        assert page.count == 3
        assert page.total == 1

    @pytest.mark.asyncio
    async def test_search_treats_wildcards_literally(self, db_session):
        await make_customer(db_session, name="100% Cotton")
        await make_customer(db_session, name="1000 Bolts")

        page = await customer_service.search(db_session, PageRequest(search="0%"))
        assert [c.name for c in page.data] == ["100% Cotton"]

    @pytest.mark.asyncio
    async def test_pagination_envelope(self, db_session):
        for i in range(23):
            await make_customer(db_session, name=f"Customer {i:02d}")

        page = await customer_service.search(db_session, PageRequest(page=3, limit=10))
        assert page.page == 3
        assert page.limit == 10
        assert page.count == 23
        assert page.total == 3
        assert [c.name for c in page.data] == ["Customer 20", "Customer 21", "Customer 22"]

    @pytest.mark.asyncio
    async def test_page_past_the_end_is_empty(self, db_session):
        await make_customer(db_session)
        page = await customer_service.search(db_session, PageRequest(page=5, limit=10))
        assert page.data == []
        assert page.count == 1
        assert page.total == 1


class TestOrderService:
    @pytest.mark.asyncio
    async def test_create_requires_existing_customer(self, db_session):
        with pytest.raises(ValidationError) as exc_info:
            await order_service.create(db_session, OrderCreate(customer_id=7, service="x"))
        assert exc_info.value.field == "customer_id"

    @pytest.mark.asyncio
    async def test_update_requires_existing_customer(self, db_session):
        await make_customer(db_session)
        order = await order_service.create(db_session, OrderCreate(customer_id=1))
        with pytest.raises(ValidationError):
            await order_service.update(db_session, order.id, OrderUpdate(customer_id=99))

    @pytest.mark.asyncio
    async def test_update_can_move_order_to_other_customer(self, db_session):
        await make_customer(db_session, name="Acme")
        other = await make_customer(db_session, name="Globex", phone="555-0200")
        order = await order_service.create(db_session, OrderCreate(customer_id=1, service="Audit"))

        await order_service.update(
            db_session,
            order.id,
            OrderUpdate(customer_id=other.id, service="Audit", amount=3, unit="days", price=900),
        )
        fetched = await order_service.get(db_session, order.id)
        assert (fetched.name, fetched.phone) == ("Globex", "555-0200")
        assert (fetched.amount, fetched.unit, fetched.price) == (3, "days", 900)

    @pytest.mark.asyncio
    async def test_deleting_customer_hides_its_orders(self, db_session):
        acme = await make_customer(db_session, name="Acme")
        globex = await make_customer(db_session, name="Globex")
        hidden = await order_service.create(
            db_session, OrderCreate(customer_id=acme.id, service="Cleaning")
        )
        await order_service.create(
            db_session, OrderCreate(customer_id=globex.id, service="Cleaning")
        )

        await customer_service.delete(db_session, acme.id)

        page = await order_service.search(db_session, PageRequest())
        assert [o.customer_id for o in page.data] == [globex.id]
        assert page.count == 1
        with pytest.raises(NotFoundError):
            await order_service.get(db_session, hidden.id)

    @pytest.mark.asyncio
    async def test_search_matches_service_description(self, db_session):
        await make_customer(db_session)
        for service in ["Window Cleaning", "Painting", "carpet cleaning"]:
            await order_service.create(db_session, OrderCreate(customer_id=1, service=service))

        page = await order_service.search(db_session, PageRequest(search="Cleaning"))
        assert [o.service for o in page.data] == ["Window Cleaning", "carpet cleaning"]
        assert page.count == 2


class TestAccountService:
    @pytest.mark.asyncio
    async def test_password_is_stored_hashed(self, db_session):
        created = await account_service.create(
            db_session, AccountCreate(name="Alice", username="alice", password="pw-123")
        )
        assert not hasattr(created, "password")

        stored = await account_service.get_by_username(db_session, "alice")
        assert stored.password != "pw-123"
        assert verify_password("pw-123", stored.password)

    @pytest.mark.asyncio
    async def test_update_rehashes_password_and_keeps_username(self, db_session):
        created = await account_service.create(
            db_session, AccountCreate(username="alice", password="old-pw")
        )
        await account_service.update(
            db_session, created.id, AccountUpdate(name="Alice B", phone="1", password="new-pw")
        )

        stored = await account_service.get_by_username(db_session, "alice")
        assert stored.name == "Alice B"
        assert verify_password("new-pw", stored.password)
        assert not verify_password("old-pw", stored.password)

    @pytest.mark.asyncio
    async def test_duplicate_username_is_rejected(self, db_session):
        await account_service.create(db_session, AccountCreate(username="alice", password="a"))
        with pytest.raises(PersistenceError, match="already taken"):
            await account_service.create(
                db_session, AccountCreate(username="alice", password="b")
            )

    @pytest.mark.asyncio
    async def test_overlong_password_is_rejected(self, db_session):
        with pytest.raises(HashingError):
            await account_service.create(
                db_session, AccountCreate(username="alice", password="x" * 100)
            )

    @pytest.mark.asyncio
    async def test_get_by_unknown_username(self, db_session):
        with pytest.raises(NotFoundError, match=r"Account with username \[ghost\] not found"):
            await account_service.get_by_username(db_session, "ghost")

    @pytest.mark.asyncio
    async def test_search_by_name(self, db_session):
        await account_service.create(
            db_session, AccountCreate(name="Alice", username="a1", password="pw")
        )
        await account_service.create(
            db_session, AccountCreate(name="Bob", username="b1", password="pw")
        )
        page = await account_service.search(db_session, PageRequest(search="ali"))
        assert [a.username for a in page.data] == ["a1"]
