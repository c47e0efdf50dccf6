"""Models for Asana entities.

Declare a model by subclassing Model with a resource path:

    from asana_sdk.models import Model

    class User(Model, resource="users"):
        name: str

or build one at runtime with model():

    User = model("User", "users", {"name": str})
"""

from asana_sdk.models.base import Model, ModelT, model
from asana_sdk.models.entities import Project, Section, Task, User, Workspace

__all__ = [
    "Model",
    "ModelT",
    "model",
    "User",
    "Workspace",
    "Project",
    "Section",
    "Task",
]
