from datetime import datetime
from typing import Dict, Optional

from fastapi.testclient import TestClient

from taskboard.db.stores import TaskStore, UserStore
from taskboard.models.task import Task
from taskboard.models.user import User


def make_user(users: UserStore, email: str, name: str = "Someone") -> User:
    return users.add(User(name=name, email=email, password_hash="not-a-real-hash"))


def make_task(tasks: TaskStore, owner_id, title: str, created_at: Optional[datetime] = None) -> Task:
    task = Task(user_id=owner_id, title=title)
    if created_at is not None:
        task.created_at = created_at
        task.updated_at = created_at
    return tasks.add(task)


def register(client: TestClient, name: str, email: str, password: str = "secret1"):
    return client.post("/auth/register", json={"name": name, "email": email, "password": password})


def login(client: TestClient, email: str, password: str = "secret1") -> Dict[str, str]:
    """Log in and return bearer headers; the session cookie is dropped."""
    response = client.post("/auth/login", json={"email": email, "password": password})
    assert response.status_code == 200, response.text
    client.cookies.clear()
    return {"Authorization": f"Bearer {response.json()['access_token']}"}
