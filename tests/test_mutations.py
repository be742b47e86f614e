# tests/test_mutations.py
import pytest

from controllers.collection import CollectionViewController, UserPicker
from controllers.counter import AggregateCounter
from controllers.mutations import (
    DeleteRequest, MutationCoordinator, TaskAssignment, TeamAssignment,
)
from controllers.resolver import ParentKind, RelationshipResolver
from models import EntityKind, TaskCreate, TaskUpdate, TeamUpdate, UserUpdate


@pytest.fixture
def parts(gateways):
    views = {kind: CollectionViewController(gateways[kind]) for kind in EntityKind}
    counter = AggregateCounter(gateways)
    resolver = RelationshipResolver(gateways[EntityKind.TEAMS], gateways[EntityKind.USERS])
    picker = UserPicker(gateways[EntityKind.USERS])
    coordinator = MutationCoordinator(gateways, views, counter, resolver, picker)
    return coordinator, views, counter, resolver, picker


def seed(fake_api):
    fake_api.add("projects", id="p1", name="Atlas")
    fake_api.add("projects", id="p2", name="Borealis")
    fake_api.add("teams", id="g1", name="Core", ownerId="u1", projectId="p1")
    fake_api.add("teams", id="g2", name="Web", ownerId="u1", projectId="p2")
    fake_api.add("users", id="u1", name="Ann", email="ann@x.io", teamId="g1")
    fake_api.add("users", id="u2", name="Bob", email="bob@x.io", teamId="g2")
    fake_api.add("tasks", id="t1", title="Ship", status="todo", assignedTo="u1")


@pytest.mark.asyncio
async def test_create_refreshes_view_and_counts(fake_api, parts):
    coordinator, views, counter, resolver, _ = parts
    seed(fake_api)
    await views[EntityKind.TASKS].open()
    await counter.refresh()

    result = await coordinator.create(EntityKind.TASKS, TaskCreate(title="Write docs", assigned_to="u2"))
    assert result.ok
    assert result.record.assigned_to == "u2"
    assert counter.snapshot.tasks == 2
    assert len(views[EntityKind.TASKS].items) == 2


@pytest.mark.asyncio
async def test_create_from_dict_evicts_parent(fake_api, parts):
    coordinator, _, _, resolver, _ = parts
    seed(fake_api)
    await resolver.resolve_children(ParentKind.PROJECT, "p1")

    result = await coordinator.create(EntityKind.TEAMS, {"name": "Ops", "owner_id": "u1", "project_id": "p1"})
    assert result.ok
    assert not resolver.is_loaded(ParentKind.PROJECT, "p1")
    teams = await resolver.resolve_children(ParentKind.PROJECT, "p1")
    assert sorted(t.name for t in teams) == ["Core", "Ops"]


@pytest.mark.asyncio
async def test_failed_create_reports_error_and_changes_nothing(fake_api, parts):
    coordinator, views, counter, _, _ = parts
    fake_api.fail[("POST", "/projects")] = 400
    result = await coordinator.create(EntityKind.PROJECTS, {"name": "Atlas"})
    assert not result.ok
    assert result.error == "boom 400"
    assert counter.snapshot is None
    assert fake_api.calls("GET") == []


@pytest.mark.asyncio
async def test_update_moving_team_evicts_old_and_new_project(fake_api, parts):
    coordinator, views, _, resolver, _ = parts
    seed(fake_api)
    await views[EntityKind.TEAMS].open()
    await resolver.resolve_children(ParentKind.PROJECT, "p1")
    await resolver.resolve_children(ParentKind.PROJECT, "p2")

    result = await coordinator.update(EntityKind.TEAMS, "g1", TeamUpdate(project_id="p2"))
    assert result.ok
    assert not resolver.is_loaded(ParentKind.PROJECT, "p1")
    assert not resolver.is_loaded(ParentKind.PROJECT, "p2")
    assert views[EntityKind.TEAMS].find("g1").project_id == "p2"


@pytest.mark.asyncio
async def test_rename_only_evicts_entries_holding_the_record(fake_api, parts):
    coordinator, views, _, resolver, _ = parts
    seed(fake_api)
    await views[EntityKind.TEAMS].open()
    await resolver.resolve_children(ParentKind.PROJECT, "p1")
    await resolver.resolve_children(ParentKind.PROJECT, "p2")

    await coordinator.update(EntityKind.TEAMS, "g2", {"name": "Frontend"})
    assert resolver.is_loaded(ParentKind.PROJECT, "p1")
    assert not resolver.is_loaded(ParentKind.PROJECT, "p2")


@pytest.mark.asyncio
async def test_reassign_task(fake_api, parts):
    coordinator, views, _, resolver, _ = parts
    seed(fake_api)
    await views[EntityKind.TASKS].open()
    assert [u.id for u in await resolver.resolve_children(ParentKind.TASK, "t1", assignee_id="u1")] == ["u1"]

    result = await coordinator.assign(TaskAssignment(task_id="t1", current_user_id="u1"), "u2")
    assert result.ok
    assert fake_api.store["tasks"]["t1"]["assignedTo"] == "u2"
    assert views[EntityKind.TASKS].find("t1").assigned_to == "u2"
    assert not resolver.is_loaded(ParentKind.TASK, "t1")
    users = await resolver.resolve_children(ParentKind.TASK, "t1", assignee_id="u2")
    assert [u.name for u in users] == ["Bob"]


@pytest.mark.asyncio
async def test_add_user_to_team_evicts_both_teams(fake_api, parts):
    coordinator, _, _, resolver, picker = parts
    seed(fake_api)
    await picker.open_for(TeamAssignment(team_id="g1"))
    await resolver.resolve_children(ParentKind.TEAM, "g1")
    await resolver.resolve_children(ParentKind.TEAM, "g2")

    result = await coordinator.assign(TeamAssignment(team_id="g1"), "u2")
    assert result.ok
    assert fake_api.store["users"]["u2"]["teamId"] == "g1"
    assert not resolver.is_loaded(ParentKind.TEAM, "g1")
    assert not resolver.is_loaded(ParentKind.TEAM, "g2")
    members = await resolver.resolve_children(ParentKind.TEAM, "g1")
    assert sorted(u.name for u in members) == ["Ann", "Bob"]


@pytest.mark.asyncio
async def test_unknown_assignment_context_is_rejected(parts):
    coordinator = parts[0]
    with pytest.raises(TypeError):
        await coordinator.assign(object(), "u1")


@pytest.mark.asyncio
async def test_delete_requires_confirmation(fake_api, parts):
    coordinator = parts[0]
    seed(fake_api)
    with pytest.raises(ValueError):
        await coordinator.delete(DeleteRequest(kind=EntityKind.TEAMS, record_id="g1"))
    assert "g1" in fake_api.store["teams"]


@pytest.mark.asyncio
async def test_delete_team_invalidates_dependents(fake_api, parts):
    coordinator, views, counter, resolver, _ = parts
    seed(fake_api)
    await views[EntityKind.TEAMS].open()
    await views[EntityKind.USERS].open()
    await counter.refresh()
    await resolver.resolve_children(ParentKind.PROJECT, "p1")
    await resolver.resolve_children(ParentKind.TEAM, "g1")

    request = DeleteRequest(kind=EntityKind.TEAMS, record_id="g1", label="Core").confirm()
    result = await coordinator.delete(request)

    assert result.ok
    assert counter.snapshot.teams == 1
    assert [t.id for t in views[EntityKind.TEAMS].items] == ["g2"]
    assert views[EntityKind.USERS].stale
    assert not resolver.is_loaded(ParentKind.TEAM, "g1")
    assert not resolver.is_loaded(ParentKind.PROJECT, "p1")


@pytest.mark.asyncio
async def test_failed_delete_leaves_state(fake_api, parts):
    coordinator, views, counter, resolver, _ = parts
    seed(fake_api)
    await views[EntityKind.TEAMS].open()
    await resolver.resolve_children(ParentKind.PROJECT, "p1")
    fake_api.fail[("DELETE", "/teams/g1")] = 409

    result = await coordinator.delete(DeleteRequest(kind=EntityKind.TEAMS, record_id="g1").confirm())
    assert not result.ok
    assert result.error == "boom 409"
    assert resolver.is_loaded(ParentKind.PROJECT, "p1")
    assert len(views[EntityKind.TEAMS].items) == 2


@pytest.mark.asyncio
async def test_invalid_dict_payload_is_reported_not_raised(fake_api, parts):
    coordinator = parts[0]
    seed(fake_api)

    created = await coordinator.create(EntityKind.PROJECTS, {"name": ""})
    assert not created.ok
    assert created.error.startswith("name:")

    updated = await coordinator.update(EntityKind.USERS, "u1", {"password": "123"})
    assert not updated.ok
    assert "password" in updated.error
    assert fake_api.calls("POST") == [] and fake_api.calls("PATCH") == []


@pytest.mark.asyncio
async def test_unchanged_team_id_in_user_edit_evicts_nothing_by_key(fake_api, parts):
    coordinator, views, _, resolver, _ = parts
    seed(fake_api)
    await views[EntityKind.USERS].open()
    evicted = []
    original_evict = resolver.evict

    def spy(kind, parent_id):
        evicted.append((kind, parent_id))
        return original_evict(kind, parent_id)

    resolver.evict = spy
    result = await coordinator.update(EntityKind.USERS, "u1", UserUpdate(name="Ann B", team_id="g1"))
    assert result.ok
    assert (ParentKind.TEAM, "g1") not in evicted


@pytest.mark.asyncio
async def test_task_edit_keeping_assignee_keeps_cached_assignee(fake_api, parts):
    coordinator, views, _, resolver, _ = parts
    seed(fake_api)
    await views[EntityKind.TASKS].open()
    await resolver.resolve_children(ParentKind.TASK, "t1", assignee_id="u1")

    result = await coordinator.update(EntityKind.TASKS, "t1", TaskUpdate(title="Ship v2", assigned_to="u1"))
    assert result.ok
    assert resolver.is_loaded(ParentKind.TASK, "t1")
