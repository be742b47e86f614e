# tests/test_resolver.py
import asyncio

import pytest

from controllers.resolver import ParentKind, RelationshipResolver
from models import EntityKind


@pytest.fixture
def resolver(gateways):
    return RelationshipResolver(gateways[EntityKind.TEAMS], gateways[EntityKind.USERS])


def seed_atlas(fake_api):
    fake_api.add("projects", id="p-atlas", name="Atlas")
    fake_api.add("projects", id="p-other", name="Other")
    fake_api.add("teams", id="g1", name="Core", ownerId="u1", projectId="p-atlas")
    fake_api.add("teams", id="g2", name="Web", ownerId="u1", projectId="p-other")
    fake_api.add("teams", id="g3", name="Ops", ownerId="u1", projectId="p-atlas")


@pytest.mark.asyncio
async def test_project_children_are_filtered_and_memoised(fake_api, resolver):
    seed_atlas(fake_api)

    teams = await resolver.resolve_children(ParentKind.PROJECT, "p-atlas")
    assert sorted(t.name for t in teams) == ["Core", "Ops"]
    assert resolver.is_loaded(ParentKind.PROJECT, "p-atlas")

    again = await resolver.resolve_children(ParentKind.PROJECT, "p-atlas")
    assert [t.id for t in again] == [t.id for t in teams]
    assert len(fake_api.calls("GET", "/teams")) == 1
    _, _, query = fake_api.calls("GET", "/teams")[0]
    assert query["limit"] == "1000"


@pytest.mark.asyncio
async def test_parent_without_children_is_cached_empty(fake_api, resolver):
    seed_atlas(fake_api)
    assert await resolver.resolve_children(ParentKind.PROJECT, "p-empty") == []
    assert resolver.cached(ParentKind.PROJECT, "p-empty") == []


@pytest.mark.asyncio
async def test_children_beyond_one_page_are_found(fake_api, gateways):
    for i in range(7):
        fake_api.add("users", id=f"u{i}", name=f"U{i}", email=f"u{i}@x.io",
                     teamId="g1" if i % 2 else "g2")
    resolver = RelationshipResolver(gateways[EntityKind.TEAMS], gateways[EntityKind.USERS], fetch_limit=3)

    users = await resolver.resolve_children(ParentKind.TEAM, "g1")
    assert [u.id for u in users] == ["u1", "u3", "u5"]
    assert [q["page"] for _, _, q in fake_api.calls("GET", "/users")] == ["1", "2", "3"]


@pytest.mark.asyncio
async def test_task_assignee_lookup(fake_api, resolver):
    fake_api.add("users", id="u1", name="Ann", email="ann@x.io")

    users = await resolver.resolve_children(ParentKind.TASK, "t1", assignee_id="u1")
    assert [u.name for u in users] == ["Ann"]

    missing = await resolver.resolve_children(ParentKind.TASK, "t2", assignee_id="ghost")
    assert missing == []
    assert resolver.is_loaded(ParentKind.TASK, "t2")


@pytest.mark.asyncio
async def test_failures_are_not_cached(fake_api, resolver):
    seed_atlas(fake_api)
    fake_api.fail[("GET", "/teams")] = 500

    assert await resolver.resolve_children(ParentKind.PROJECT, "p-atlas") == []
    assert not resolver.is_loaded(ParentKind.PROJECT, "p-atlas")
    assert (ParentKind.PROJECT, "p-atlas") in resolver.errors

    del fake_api.fail[("GET", "/teams")]
    teams = await resolver.resolve_children(ParentKind.PROJECT, "p-atlas")
    assert len(teams) == 2
    assert resolver.errors == {}


@pytest.mark.asyncio
async def test_eviction_forces_refetch(fake_api, resolver):
    seed_atlas(fake_api)
    await resolver.resolve_children(ParentKind.PROJECT, "p-atlas")

    assert resolver.evict(ParentKind.PROJECT, "p-atlas")
    assert not resolver.evict(ParentKind.PROJECT, None)
    fake_api.add("teams", id="g4", name="Data", ownerId="u1", projectId="p-atlas")

    teams = await resolver.resolve_children(ParentKind.PROJECT, "p-atlas")
    assert len(teams) == 3
    assert len(fake_api.calls("GET", "/teams")) == 2


@pytest.mark.asyncio
async def test_evict_holding_drops_entries_containing_record(fake_api, resolver):
    seed_atlas(fake_api)
    await resolver.resolve_children(ParentKind.PROJECT, "p-atlas")
    await resolver.resolve_children(ParentKind.PROJECT, "p-other")

    assert resolver.evict_holding("g2") == 1
    assert resolver.is_loaded(ParentKind.PROJECT, "p-atlas")
    assert not resolver.is_loaded(ParentKind.PROJECT, "p-other")


@pytest.mark.asyncio
async def test_concurrent_resolutions_share_one_fetch(fake_api, resolver):
    seed_atlas(fake_api)
    first, second = await asyncio.gather(
        resolver.resolve_children(ParentKind.PROJECT, "p-atlas"),
        resolver.resolve_children(ParentKind.PROJECT, "p-atlas"),
    )
    assert [t.id for t in first] == [t.id for t in second]
    assert len(fake_api.calls("GET", "/teams")) == 1
    assert not resolver.is_resolving(ParentKind.PROJECT, "p-atlas")


@pytest.mark.asyncio
async def test_eviction_during_fetch_discards_result(fake_api, resolver):
    seed_atlas(fake_api)
    pending = asyncio.ensure_future(resolver.resolve_children(ParentKind.PROJECT, "p-atlas"))
    await asyncio.sleep(0)
    resolver.evict(ParentKind.PROJECT, "p-atlas")
    teams = await pending
    assert len(teams) == 2
    assert not resolver.is_loaded(ParentKind.PROJECT, "p-atlas")


@pytest.mark.asyncio
async def test_clear_empties_everything(fake_api, resolver):
    seed_atlas(fake_api)
    await resolver.resolve_children(ParentKind.PROJECT, "p-atlas")
    resolver.clear()
    assert resolver.cached(ParentKind.PROJECT, "p-atlas") is None
