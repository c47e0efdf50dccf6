"""Request construction and response decoding shared by the sync and async clients."""

from collections.abc import Mapping
from typing import Any
from urllib.parse import quote

import httpx
from pydantic import ValidationError

from asana_sdk.exceptions import AsanaAPIError, AsanaValidationError
from asana_sdk.models.base import Model, ModelT

# (parent model, parent gid)
Scope = tuple[type[Model], str]


def build_path(model_cls: type[Model], gid: str | None = None, scope: Scope | None = None) -> str:
    """Build the request path relative to the API base URL.

    Returns:
        ``[parent_resource/parent_gid/]resource[/gid]``
    """
    segments: list[str] = []
    if scope is not None:
        parent_cls, parent_gid = scope
        segments.extend([parent_cls.endpoint(), _require_gid(parent_gid)])
    segments.append(model_cls.endpoint())
    if gid is not None:
        segments.append(_require_gid(gid))
    return "/".join(segments)


def build_params(
    model_cls: type[Model], params: Mapping[str, Any] | None = None
) -> dict[str, Any]:
    """Build query parameters; opt_fields always reflects the model."""
    query: dict[str, Any] = dict(params or {})
    query["opt_fields"] = ",".join(model_cls.opt_fields())
    return query


def decode_one(response: httpx.Response, model_cls: type[ModelT]) -> ModelT:
    """Decode a single-object response into model_cls."""
    data = _data(response)
    if not isinstance(data, dict):
        raise AsanaValidationError(
            f"Expected a {model_cls.__name__} object, got {type(data).__name__}"
        )
    return _validate(model_cls, data)


def decode_many(response: httpx.Response, model_cls: type[ModelT]) -> list[ModelT]:
    """Decode a collection response into a list of model_cls, keeping order."""
    data = _data(response)
    if not isinstance(data, list):
        raise AsanaValidationError(
            f"Expected a list of {model_cls.__name__}, got {type(data).__name__}"
        )
    return [_validate(model_cls, item) for item in data]


def error_message(response: httpx.Response) -> str:
    """Human-readable message for an error response.

    Asana error bodies look like ``{"errors": [{"message": "..."}]}``.
    """
    prefix = f"Asana API returned {response.status_code}"
    try:
        body = response.json()
    except ValueError:
        return prefix
    if not isinstance(body, dict) or not isinstance(body.get("errors"), list):
        return prefix
    messages = [
        str(error["message"])
        for error in body["errors"]
        if isinstance(error, dict) and error.get("message")
    ]
    if not messages:
        return prefix
    return f"{prefix}: {'; '.join(messages)}"


def _data(response: httpx.Response) -> Any:
    """Check the status and return the ``data`` member of the body."""
    if not response.is_success:
        raise AsanaAPIError(
            error_message(response),
            status_code=response.status_code,
            body=response.text,
        )
    try:
        body = response.json()
    except ValueError as e:
        raise AsanaValidationError(f"Response body is not valid JSON: {e}") from e
    if not isinstance(body, dict) or "data" not in body:
        raise AsanaValidationError("Response body has no 'data' member")
    return body["data"]


def _validate(model_cls: type[ModelT], item: Any) -> ModelT:
    try:
        return model_cls.model_validate(item)
    except ValidationError as e:
        raise AsanaValidationError(
            f"Response does not match {model_cls.__name__}: {e}"
        ) from e


def _require_gid(gid: str) -> str:
    """Validate a gid and percent-encode it as a single path segment."""
    if not isinstance(gid, str) or not gid:
        raise ValueError("gid must be a non-empty string")
    return quote(gid, safe="")
