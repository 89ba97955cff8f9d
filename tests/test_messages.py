"""Tests for the message store."""

import pytest

from chefbook.errors import Forbidden, NotFound, ValidationFailed
from chefbook.services.messages import list_messages, mark_read, send_message


@pytest.mark.asyncio
class TestSendMessage:
    async def test_direct_message_is_stored_unread(self, db, customer, chef):
        chef_user, _ = chef
        message = await send_message(db, customer.id, chef_user.id, "Are you free on Friday?")
        assert message.id is not None
        assert message.read is False
        assert message.timestamp is not None
        assert message.booking_id is None

    async def test_booking_parties_may_message(self, db, customer, chef, make_booking):
        chef_user, profile = chef
        booking = await make_booking(customer, profile)
        from_customer = await send_message(db, customer.id, chef_user.id, "hi", booking.id)
        from_chef = await send_message(db, chef_user.id, customer.id, "hello", booking.id)
        assert from_customer.booking_id == booking.id
        assert from_chef.booking_id == booking.id

    async def test_outsider_cannot_message_on_booking(self, db, customer, other_customer, chef, make_booking):
        chef_user, profile = chef
        booking = await make_booking(customer, profile)
        with pytest.raises(Forbidden):
            await send_message(db, other_customer.id, chef_user.id, "hi", booking.id)

    async def test_unknown_booking(self, db, customer, chef):
        chef_user, _ = chef
        with pytest.raises(NotFound):
            await send_message(db, customer.id, chef_user.id, "hi", 999)

    async def test_unknown_receiver(self, db, customer):
        with pytest.raises(NotFound):
            await send_message(db, customer.id, 999, "hi")

    async def test_blank_content_rejected(self, db, customer, chef):
        chef_user, _ = chef
        with pytest.raises(ValidationFailed):
            await send_message(db, customer.id, chef_user.id, "   ")


@pytest.mark.asyncio
class TestListMessages:
    async def test_conversation_is_two_way_and_ordered(self, db, customer, other_customer, chef):
        chef_user, _ = chef
        m1 = await send_message(db, customer.id, chef_user.id, "one")
        m2 = await send_message(db, chef_user.id, customer.id, "two")
        await send_message(db, other_customer.id, chef_user.id, "not ours")
        m3 = await send_message(db, customer.id, chef_user.id, "three")

        conversation = await list_messages(db, customer.id, with_user_id=chef_user.id)
        assert [m.id for m in conversation] == [m1.id, m2.id, m3.id]

    async def test_booking_filter_wins(self, db, customer, chef, make_booking):
        chef_user, profile = chef
        booking = await make_booking(customer, profile)
        await send_message(db, customer.id, chef_user.id, "before booking")
        tied = await send_message(db, customer.id, chef_user.id, "about the booking", booking.id)

        result = await list_messages(db, customer.id, with_user_id=chef_user.id, booking_id=booking.id)
        assert [m.id for m in result] == [tied.id]

    async def test_all_messages_of_requester(self, db, customer, other_customer, chef):
        chef_user, _ = chef
        await send_message(db, customer.id, chef_user.id, "a")
        await send_message(db, chef_user.id, customer.id, "b")
        await send_message(db, other_customer.id, chef_user.id, "c")

        assert {m.content for m in await list_messages(db, customer.id)} == {"a", "b"}
        assert {m.content for m in await list_messages(db, chef_user.id)} == {"a", "b", "c"}


@pytest.mark.asyncio
class TestMarkRead:
    async def test_only_receiver_messages_flip(self, db, customer, other_customer, chef):
        chef_user, _ = chef
        to_chef = await send_message(db, customer.id, chef_user.id, "to chef")
        to_customer = await send_message(db, chef_user.id, customer.id, "to customer")
        to_other = await send_message(db, chef_user.id, other_customer.id, "to other")

        updated = await mark_read(db, chef_user.id, [to_chef.id, to_customer.id, to_other.id, 999])

        assert updated == 1
        await db.refresh(to_chef)
        await db.refresh(to_customer)
        await db.refresh(to_other)
        assert to_chef.read is True
        assert to_customer.read is False
        assert to_other.read is False

    async def test_empty_list(self, db, customer):
        assert await mark_read(db, customer.id, []) == 0
