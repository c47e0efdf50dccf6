"""Declarative Pydantic models for Asana entities.

A model is a regular Pydantic model that also knows which Asana resource it
lives at and which fields to ask for. The field selection is derived from the
model's own fields, so a model doubles as the deserialization target and as
the source of the ``opt_fields`` query parameter.

Example:
    class Project(Model, resource="projects"):
        name: str

    class Task(Model, resource="tasks"):
        name: str
        projects: list[Project] = []

    Task.endpoint()    # "tasks"
    Task.opt_fields()  # ("resource_type", "name", "projects.resource_type", "projects.name")
"""

from collections.abc import Iterator, Mapping, Sequence
from types import NoneType, UnionType
from typing import Annotated, Any, ClassVar, TypeVar, Union, get_args, get_origin

from pydantic import BaseModel, create_model

from asana_sdk.exceptions import AsanaConfigError

# =============================================================================
# Constants
# =============================================================================

# Asana returns gid on every object whether it was requested or not.
ALWAYS_RETURNED_FIELDS = frozenset({"gid"})

# Collection types whose items may be embedded models
SEQUENCE_ORIGINS = (list, tuple, Sequence)

ModelT = TypeVar("ModelT", bound="Model")

# =============================================================================
# Base Model
# =============================================================================


class Model(BaseModel):
    """Base class for Asana entity models.

    Subclasses pass their resource path as a class keyword:

        class User(Model, resource="users"):
            name: str

    Subclasses without a ``resource`` keyword inherit their parent's resource.

    Every model carries ``gid`` and ``resource_type``. Undeclared fields in a
    response are kept in ``model_extra`` but never requested. A declared field
    without a default that is missing from the response fails validation.
    """

    __resource__: ClassVar[str | None] = None

    gid: str | None = None
    resource_type: str | None = None

    model_config = {"extra": "allow", "populate_by_name": True}

    def __init_subclass__(cls, resource: str | None = None, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        if resource is not None:
            if not isinstance(resource, str) or not resource.strip("/"):
                raise ValueError(f"{cls.__name__}: resource must be a non-empty string")
            cls.__resource__ = resource.strip("/")

    @classmethod
    def endpoint(cls) -> str:
        """Resource path segment, e.g. ``"tasks"``."""
        if not cls.__resource__:
            raise AsanaConfigError(f"{cls.__name__} does not declare a resource path")
        return cls.__resource__

    @classmethod
    def field_names(cls) -> tuple[str, ...]:
        """Top-level field names requested for this model."""
        names = (
            info.alias or name
            for name, info in cls.model_fields.items()
            if name not in ALWAYS_RETURNED_FIELDS
        )
        return tuple(dict.fromkeys(names))

    @classmethod
    def opt_fields(cls) -> tuple[str, ...]:
        """Flattened field selection, relationship fields dot-qualified.

        Returns:
            Unique field paths in declaration order, e.g.
            ``("resource_type", "name", "projects.resource_type", "projects.name")``.
        """
        return tuple(dict.fromkeys(_selection(cls, frozenset())))


# =============================================================================
# Builder
# =============================================================================


def model(
    name: str,
    resource: str,
    fields: Mapping[str, Any] | None = None,
    *,
    base: type[Model] = Model,
) -> type[Model]:
    """Build a model class at runtime.

    Args:
        name: Class name of the new model.
        resource: Resource path segment, e.g. ``"users"``.
        fields: Field name to type, or to a ``(type, default)`` tuple.
            A bare type makes the field required.
        base: Model class to extend.

    Returns:
        A new Model subclass.

    Example:
        User = model("User", "users", {"name": str, "email": (str | None, None)})
    """
    definitions: dict[str, Any] = {}
    for field_name, definition in (fields or {}).items():
        if isinstance(definition, tuple):
            definitions[field_name] = definition
        else:
            definitions[field_name] = (definition, ...)

    return create_model(
        name,
        __base__=base,
        __cls_kwargs__={"resource": resource},
        **definitions,
    )


# =============================================================================
# Field selection helpers
# =============================================================================


def _selection(model_cls: type[Model], expanding: frozenset[type[Model]]) -> Iterator[str]:
    """Yield field paths of model_cls, expanding relationships recursively."""
    _ensure_complete(model_cls)
    expanding = expanding | {model_cls}
    for name, info in model_cls.model_fields.items():
        if name in ALWAYS_RETURNED_FIELDS:
            continue
        key = info.alias or name
        related = related_model(info.annotation)
        if related is None or related in expanding:
            # Cycles fall back to the compact representation
            yield key
            continue
        for child in _selection(related, expanding):
            yield f"{key}.{child}"


def _ensure_complete(model_cls: type[Model]) -> None:
    """Resolve forward references to models declared after model_cls."""
    if model_cls.__pydantic_complete__:
        return
    model_cls.model_rebuild(raise_errors=False)
    if not model_cls.__pydantic_complete__:
        raise AsanaConfigError(
            f"{model_cls.__name__} references types that are not defined yet"
        )


def related_model(annotation: Any) -> type[Model] | None:
    """Return the Model referenced by an annotation, if any.

    Handles bare models, ``Model | None`` and ``list[Model]`` or
    ``Sequence[Model]``, nested in any combination. Unions of several types
    and mappings are not relationships.
    """
    origin = get_origin(annotation)
    if origin is None:
        if isinstance(annotation, type) and issubclass(annotation, Model):
            return annotation
        return None
    args = get_args(annotation)
    if origin is Annotated:
        return related_model(args[0])
    if origin is Union or origin is UnionType:
        members = [arg for arg in args if arg is not NoneType]
        return related_model(members[0]) if len(members) == 1 else None
    if origin in SEQUENCE_ORIGINS and args:
        return related_model(args[0])
    return None
