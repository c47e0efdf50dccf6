"""Ready-made models for common Asana entities.

These request a small, commonly useful set of fields. Declare your own Model
subclasses when you need different fields or relationships.
"""

from asana_sdk.models.base import Model


class User(Model, resource="users"):
    """Asana user."""

    name: str | None = None
    email: str | None = None


class Workspace(Model, resource="workspaces"):
    """Asana workspace or organization."""

    name: str | None = None
    is_organization: bool | None = None


class Project(Model, resource="projects"):
    """Asana project."""

    name: str | None = None
    archived: bool | None = None
    color: str | None = None


class Section(Model, resource="sections"):
    """Section within a project."""

    name: str | None = None


class Task(Model, resource="tasks"):
    """Asana task with its assignee and projects embedded."""

    name: str | None = None
    completed: bool | None = None
    due_on: str | None = None
    notes: str | None = None
    assignee: User | None = None
    projects: list[Project] = []
