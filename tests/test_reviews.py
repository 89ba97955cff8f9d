"""Tests for the review ledger."""

import asyncio

import pytest

from chefbook.errors import Forbidden, NotFound
from chefbook.models.booking import BookingStatus
from chefbook.services.reviews import KeyedLock, add_review, chef_locks


@pytest.mark.asyncio
class TestAddReview:
    async def test_requires_completed_booking(self, db, customer, chef, make_booking):
        _, profile = chef
        await make_booking(customer, profile, BookingStatus.CONFIRMED)
        with pytest.raises(Forbidden) as exc_info:
            await add_review(db, profile.id, customer, 5, "great")
        assert "completed booking" in exc_info.value.detail

    async def test_booking_with_another_chef_does_not_count(self, db, customer, chef, other_chef, make_booking):
        _, profile = chef
        _, other_profile = other_chef
        await make_booking(customer, other_profile, BookingStatus.COMPLETED)
        with pytest.raises(Forbidden):
            await add_review(db, profile.id, customer, 4, "fine")

    async def test_unknown_chef(self, db, customer):
        with pytest.raises(NotFound):
            await add_review(db, 404, customer, 5, "who?")

    async def test_first_review_sets_rating(self, db, customer, chef, make_booking):
        _, profile = chef
        await make_booking(customer, profile, BookingStatus.COMPLETED)
        updated = await add_review(db, profile.id, customer, 5, "great")
        assert updated.rating == 5.0
        assert len(updated.reviews) == 1
        assert updated.reviews[0].user_id == customer.id
        assert updated.reviews[0].comment == "great"

    async def test_rating_is_mean_of_all_reviews(self, db, customer, other_customer, chef, make_booking):
        _, profile = chef
        await make_booking(customer, profile, BookingStatus.COMPLETED)
        await make_booking(other_customer, profile, BookingStatus.COMPLETED)
        await add_review(db, profile.id, customer, 5, "a")
        await add_review(db, profile.id, other_customer, 2, "b")
        updated = await add_review(db, profile.id, customer, 4, "c")
        assert updated.rating == pytest.approx(11 / 3)
        assert [r.rating for r in updated.reviews] == [5, 2, 4]

    async def test_repeat_reviews_from_same_user_are_kept(self, db, customer, chef, make_booking):
        _, profile = chef
        await make_booking(customer, profile, BookingStatus.COMPLETED)
        await add_review(db, profile.id, customer, 1, "first")
        updated = await add_review(db, profile.id, customer, 3, "second")
        assert len(updated.reviews) == 2
        assert updated.rating == 2.0

    async def test_concurrent_reviews_are_all_counted(
        self, db, session_factory, make_user, chef, make_booking
    ):
        _, profile = chef
        reviewers = [await make_user(f"reviewer{i}") for i in range(5)]
        for reviewer in reviewers:
            await make_booking(reviewer, profile, BookingStatus.COMPLETED)
        await db.commit()

        async def review(reviewer, rating):
            async with session_factory() as session:
                return await add_review(session, profile.id, reviewer, rating, "")

        ratings = [5, 4, 3, 2, 1]
        await asyncio.gather(*[review(r, s) for r, s in zip(reviewers, ratings)])

        async with session_factory() as session:
            from chefbook.services.chefs import get_chef

            final = await get_chef(session, profile.id)
        assert len(final.reviews) == 5
        assert final.rating == pytest.approx(3.0)
        assert len(chef_locks) == 0


@pytest.mark.asyncio
class TestKeyedLock:
    async def test_serializes_same_key(self):
        locks = KeyedLock()
        order = []

        async def worker(name):
            async with locks.hold(1):
                order.append(f"{name}-in")
                await asyncio.sleep(0.01)
                order.append(f"{name}-out")

        await asyncio.gather(worker("a"), worker("b"))
        assert order in (["a-in", "a-out", "b-in", "b-out"], ["b-in", "b-out", "a-in", "a-out"])
        assert len(locks) == 0

    async def test_different_keys_do_not_block(self):
        locks = KeyedLock()
        async with locks.hold(1):
            async with locks.hold(2):
                assert len(locks) == 2
        assert len(locks) == 0
