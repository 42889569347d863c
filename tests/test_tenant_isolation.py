"""Cross-tenant isolation.

Learn: Alice and Bob each own an organization. Every test hands Bob a
real id from Alice's organization and checks that reading, changing or
deleting it through Bob's token behaves as if the row did not exist,
and that Alice's data is untouched afterwards.
"""

import pytest
import pytest_asyncio

from taskhub.services.project_service import ProjectService
from taskhub.services.todo_service import TodoService


@pytest_asyncio.fixture()
async def tenants(client, make_user):
    alice = await make_user("alice")
    bob = await make_user("bob")

    r = await client.post("/api/v1/projects", json={"name": "Secret"}, headers=alice["headers"])
    project = r.json()
    r = await client.post(
        f"/api/v1/projects/{project['id']}/todos",
        json={"title": "Launch plan", "order": 0},
        headers=alice["headers"],
    )
    todo = r.json()
    return {"alice": alice, "bob": bob, "project": project, "todo": todo}


@pytest.mark.asyncio
async def test_other_tenant_cannot_get_project(client, tenants):
    project, bob = tenants["project"], tenants["bob"]
    r = await client.get(f"/api/v1/projects/{project['id']}", headers=bob["headers"])
    assert r.status_code == 404
    assert r.text == "Project not found"


@pytest.mark.asyncio
async def test_other_tenant_does_not_see_projects(client, tenants):
    r = await client.get("/api/v1/projects", headers=tenants["bob"]["headers"])
    assert r.json() == []


@pytest.mark.asyncio
async def test_other_tenant_cannot_modify_or_delete_project(client, tenants):
    project, bob, alice = tenants["project"], tenants["bob"], tenants["alice"]

    r = await client.patch(
        f"/api/v1/projects/{project['id']}", json={"name": "Pwned"}, headers=bob["headers"]
    )
    assert r.status_code == 404
    r = await client.delete(f"/api/v1/projects/{project['id']}", headers=bob["headers"])
    assert r.status_code == 404
    r = await client.delete("/api/v1/projects", headers=bob["headers"])
    assert r.json() == []

    r = await client.get(f"/api/v1/projects/{project['id']}", headers=alice["headers"])
    assert r.json()["name"] == "Secret"


@pytest.mark.asyncio
async def test_other_tenant_cannot_touch_todos(client, tenants):
    project, todo, bob = tenants["project"], tenants["todo"], tenants["bob"]
    base = f"/api/v1/projects/{project['id']}/todos"

    r = await client.get(base, headers=bob["headers"])
    assert r.json() == []
    r = await client.get(f"{base}/{todo['id']}", headers=bob["headers"])
    assert r.status_code == 404
    r = await client.patch(f"{base}/{todo['id']}", json={"completed": True}, headers=bob["headers"])
    assert r.status_code == 404
    r = await client.delete(f"{base}/{todo['id']}", headers=bob["headers"])
    assert r.status_code == 404
    r = await client.delete(base, headers=bob["headers"])
    assert r.json() == []

    r = await client.get(f"{base}/{todo['id']}", headers=tenants["alice"]["headers"])
    assert r.status_code == 200
    assert r.json()["completed"] is False


@pytest.mark.asyncio
async def test_other_tenant_cannot_add_todo_to_foreign_project(client, tenants):
    project, bob, alice = tenants["project"], tenants["bob"], tenants["alice"]
    r = await client.post(
        f"/api/v1/projects/{project['id']}/todos",
        json={"title": "Injected", "order": 0},
        headers=bob["headers"],
    )
    assert r.status_code == 404

    r = await client.get(f"/api/v1/projects/{project['id']}/todos", headers=alice["headers"])
    assert [t["title"] for t in r.json()] == ["Launch plan"]


@pytest.mark.asyncio
async def test_scoped_services_ignore_foreign_ids(db_session, tenants):
    """Same guarantees one layer down, straight against the services."""
    project, todo = tenants["project"], tenants["todo"]
    bob_org = tenants["bob"]["org"]["id"]
    projects = ProjectService(db_session)
    todos = TodoService(db_session)

    assert await projects.get(project["id"], bob_org) is None
    assert await projects.update(project["id"], bob_org, name="x") is None
    assert await projects.delete(project["id"], bob_org) is None
    assert await todos.get(todo["id"], bob_org) is None
    assert await todos.update(todo["id"], bob_org, title="x") is None
    assert await todos.delete(todo["id"], bob_org) is None
    assert await todos.list_for_project(project["id"], bob_org) == []
    assert await todos.clear(project["id"], bob_org) == []

    alice_org = tenants["alice"]["org"]["id"]
    assert (await projects.get(project["id"], alice_org)).name == "Secret"
    assert (await todos.get(todo["id"], alice_org)).title == "Launch plan"
