"""Tests for the in-memory backend's unconfirmed order creation."""

import pytest

from fieldservice.schemas.order_schema import OrderAction, ServiceOrderStatus, UnconfirmedOrder
from fieldservice.services.backend import BackendError
from fieldservice.services.memory_backend import InMemoryBackend


def _order(**overrides) -> UnconfirmedOrder:
    data = {
        "calendar_id": "cal_tech1",
        "customer_name": "Ana Pérez",
        "customer_phone": "18095551234",
        "customer_address": "Av. Churchill 10",
        "appliance_type": "Washer",
        "issue_description": "Does not drain",
        "latitude": 18.47,
        "longitude": -69.94,
    }
    data.update(overrides)
    return UnconfirmedOrder(**data)


class TestAddUnconfirmedOrder:
    @pytest.mark.asyncio
    async def test_creates_new_customer(self, backend):
        await backend.add_unconfirmed_order(_order())
        state = backend.state
        customer = next(c for c in state.customers if c.phone == "18095551234")
        assert customer.name == "Ana Pérez"
        assert customer.latitude == 18.47
        assert customer.service_history == [state.service_orders[-1].id]

    @pytest.mark.asyncio
    async def test_matches_returning_customer_by_phone(self, backend):
        before = len(backend.state.customers)
        await backend.add_unconfirmed_order(_order(customer_phone="18095550101"))
        state = backend.state
        assert len(state.customers) == before
        returning = next(c for c in state.customers if c.id == "cust_returning")
        assert returning.service_history == [state.service_orders[-1].id]
        assert state.service_orders[-1].customer_id == "cust_returning"

    @pytest.mark.asyncio
    async def test_order_fields(self, backend):
        await backend.add_unconfirmed_order(_order())
        order = backend.state.service_orders[-1]
        assert order.service_order_number == "OS-0001"
        assert order.title == "Washer - Ana Pérez"
        assert order.status == ServiceOrderStatus.PENDING_CONFIRMATION
        assert order.history[0].action == OrderAction.CREATED
        assert order.history[0].user_id == "public_form"
        assert order.start is None

    @pytest.mark.asyncio
    async def test_numbers_are_sequential(self, backend):
        await backend.add_unconfirmed_order(_order())
        await backend.add_unconfirmed_order(_order(customer_phone="18095559999"))
        numbers = [o.service_order_number for o in backend.state.service_orders]
        assert numbers == ["OS-0001", "OS-0002"]
        assert backend.state.last_service_order_number == 2
        assert backend.write_count == 2

    @pytest.mark.asyncio
    async def test_injected_failure_leaves_state_untouched(self, backend):
        backend.fail_next_write("offline")
        with pytest.raises(BackendError, match="offline"):
            await backend.add_unconfirmed_order(_order())
        assert backend.state.service_orders == []
        assert backend.state.last_service_order_number == 0
        assert backend.write_count == 0

    @pytest.mark.asyncio
    async def test_failure_is_one_shot(self, backend):
        backend.fail_next_write()
        with pytest.raises(BackendError):
            await backend.add_unconfirmed_order(_order())
        await backend.add_unconfirmed_order(_order())
        assert len(backend.state.service_orders) == 1

    @pytest.mark.asyncio
    async def test_missing_state(self):
        with pytest.raises(BackendError):
            await InMemoryBackend().add_unconfirmed_order(_order())


class TestStateAccess:
    @pytest.mark.asyncio
    async def test_initial_state_is_a_copy(self, backend):
        state = await backend.get_initial_state()
        state.customers.clear()
        assert len(backend.state.customers) == 1

    @pytest.mark.asyncio
    async def test_missing_state_is_none(self):
        assert await InMemoryBackend().get_initial_state() is None

    @pytest.mark.asyncio
    async def test_save_state(self, backend):
        state = await backend.get_initial_state()
        await backend.save_state(state.model_copy(update={"last_service_order_number": 41}))
        assert backend.state.last_service_order_number == 41
        assert backend.write_count == 1
