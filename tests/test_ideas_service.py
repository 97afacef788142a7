"""
Tests for the idea repository.

Exercises ordering rules, partial updates, transactional reorder and
server-side moves against an in-memory SQLite database.
"""
import pytest
from sqlalchemy import func, select, text

from app.core.errors import IdeaNotFoundError, ReorderError
from app.models import idea_tags
from app.services import ideas as idea_service
from app.services.ideas import ReorderStatus


async def _create(db, title, platform="twitter", tags=()):
    return await idea_service.create_idea(db, title=title, platform=platform, tag_names=tags)


# =============================================================================
# Create / list
# =============================================================================

class TestCreateAndList:

    async def test_first_idea_gets_order_zero_then_max_plus_one(self, db):
        first = await _create(db, "first")
        second = await _create(db, "second")

        assert first.order == 0
        assert second.order == 1

    async def test_order_follows_current_max(self, db):
        idea = await _create(db, "a")
        await idea_service.update_idea(db, idea.id, {"order": 41})

        assert (await _create(db, "b")).order == 42

    async def test_created_idea_is_hydrated(self, db):
        idea = await idea_service.create_idea(
            db,
            title="Hello",
            description="World",
            platform="linkedin",
            tag_names=["Career", "growth"],
        )
        assert idea.id is not None
        assert idea.created_at is not None
        assert idea.description == "World"
        assert [t.name for t in idea.tags] == ["career", "growth"]

    async def test_list_sorted_descending_by_order(self, db):
        for title in ["a", "b", "c"]:
            await _create(db, title)

        ideas = await idea_service.list_ideas(db)
        assert [i.title for i in ideas] == ["c", "b", "a"]

    async def test_list_filters_by_platform(self, db):
        await _create(db, "tweet", "twitter")
        await _create(db, "post", "reddit")

        ideas = await idea_service.list_ideas(db, "reddit")
        assert [i.title for i in ideas] == ["post"]

    async def test_get_missing_raises(self, db):
        with pytest.raises(IdeaNotFoundError):
            await idea_service.get_idea(db, 404)


# =============================================================================
# Update / delete
# =============================================================================

class TestUpdateAndDelete:

    async def test_partial_update_only_changes_given_fields(self, db):
        idea = await idea_service.create_idea(
            db, title="Old", description="keep me", platform="twitter", tag_names=["t"]
        )
        updated = await idea_service.update_idea(db, idea.id, {"title": "New"})

        assert updated.title == "New"
        assert updated.description == "keep me"
        assert updated.platform == "twitter"
        assert updated.order == idea.order
        assert [t.name for t in updated.tags] == ["t"]

    async def test_update_missing_raises(self, db):
        with pytest.raises(IdeaNotFoundError):
            await idea_service.update_idea(db, 999, {"title": "x"})

    async def test_update_rejects_unknown_fields(self, db):
        idea = await _create(db, "a")
        with pytest.raises(ValueError):
            await idea_service.update_idea(db, idea.id, {"created_at": None})

    async def test_update_tags_leaves_other_fields(self, db):
        idea = await _create(db, "a", tags=["a", "b"])
        updated = await idea_service.update_idea_tags(db, idea.id, ["b", "c"])

        assert {t.name for t in updated.tags} == {"b", "c"}
        assert updated.title == "a"
        assert updated.order == idea.order

    async def test_update_tags_missing_raises(self, db):
        with pytest.raises(IdeaNotFoundError):
            await idea_service.update_idea_tags(db, 123, ["x"])

    async def test_delete_removes_links(self, db):
        idea = await _create(db, "a", tags=["x", "y"])
        await idea_service.delete_idea(db, idea.id)

        assert await idea_service.list_ideas(db) == []
        links = (await db.execute(select(func.count()).select_from(idea_tags))).scalar_one()
        assert links == 0

    async def test_delete_missing_is_noop(self, db):
        await idea_service.delete_idea(db, 12345)

    async def test_foreign_key_cascade_enabled(self, db):
        idea = await _create(db, "a", tags=["x"])
        await db.execute(text("DELETE FROM ideas WHERE id = :id"), {"id": idea.id})
        await db.commit()

        links = (await db.execute(select(func.count()).select_from(idea_tags))).scalar_one()
        assert links == 0


# =============================================================================
# Reorder
# =============================================================================

class TestReorder:

    async def test_reorder_scenario(self, db):
        # 展示顺序 A, B, C；把 C 拖到最上方
        c = await _create(db, "C")
        b = await _create(db, "B")
        a = await _create(db, "A")
        assert [i.title for i in await idea_service.list_ideas(db)] == ["A", "B", "C"]

        result = await idea_service.reorder(db, [(c.id, 3), (a.id, 2), (b.id, 1)])

        assert result.ok
        assert result.applied == 3
        ideas = await idea_service.list_ideas(db)
        assert [(i.title, i.order) for i in ideas] == [("C", 3), ("A", 2), ("B", 1)]

    async def test_unknown_id_rejects_whole_batch(self, db):
        a = await _create(db, "A")
        b = await _create(db, "B")

        result = await idea_service.reorder(db, [(a.id, 10), (b.id, 9), (777, 8)])

        assert result.status is ReorderStatus.REJECTED
        assert result.missing_ids == [777]
        orders = {i.id: i.order for i in await idea_service.list_ideas(db)}
        assert orders == {a.id: 0, b.id: 1}

    async def test_empty_batch_applied(self, db):
        result = await idea_service.reorder(db, [])
        assert result.ok
        assert result.applied == 0


class TestMove:

    async def test_move_within_full_list(self, db):
        a = await _create(db, "A")
        await _create(db, "B")
        await _create(db, "C")

        ideas = await idea_service.move_idea(db, a.id, 0)

        assert [i.title for i in ideas] == ["A", "C", "B"]
        assert [i.order for i in ideas] == [3, 2, 1]

    async def test_filtered_move_keeps_orders_unique(self, db):
        a = await _create(db, "A", "twitter")
        await _create(db, "B", "reddit")
        await _create(db, "C", "twitter")
        await _create(db, "D", "reddit")

        visible = await idea_service.move_idea(db, a.id, 0, platform="twitter")
        assert [i.title for i in visible] == ["A", "C"]

        full = await idea_service.list_ideas(db)
        assert [i.title for i in full] == ["D", "A", "B", "C"]
        orders = [i.order for i in full]
        assert len(set(orders)) == len(orders)

    async def test_move_missing_raises(self, db):
        with pytest.raises(IdeaNotFoundError):
            await idea_service.move_idea(db, 99, 0)

    async def test_move_out_of_range_raises(self, db):
        a = await _create(db, "A")
        with pytest.raises(ReorderError):
            await idea_service.move_idea(db, a.id, 5)


class TestRollback:

    async def test_non_database_error_rolls_back_create(self, db, monkeypatch):
        async def broken(*args, **kwargs):
            raise RuntimeError("relink failed")

        monkeypatch.setattr(idea_service, "relink_tags", broken)

        with pytest.raises(RuntimeError):
            await _create(db, "half written", tags=["x"])

        assert await idea_service.list_ideas(db) == []
