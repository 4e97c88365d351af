"""Validate page data against the schema exported by ``+schema.py``.

A schema may be any of:

* a pydantic model class or ``pydantic.TypeAdapter``;
* a ``msgspec.Struct`` subclass;
* any object with a ``parse(data)`` method raising ``ValueError``.

Validation failures are reported as a list of :class:`ValidationIssue`, one
per violation, each naming the dotted path of the offending field.

Example
-------
>>> import pydantic
>>> class Post(pydantic.BaseModel):
...     slug: str
>>> validate(Post, {"slug": 3})[0].path
'slug'
"""

from __future__ import annotations

import dataclasses as dc
import typing as typ

import msgspec
import pydantic

from shork.errors import SchemaValidationError


@dc.dataclass(frozen=True, slots=True)
class ValidationIssue:
    """One schema violation."""

    path: str
    message: str

    def __str__(self) -> str:
        return f"Path: {self.path or '<root>'} | Message: {self.message}"


def _pydantic_issues(exc: pydantic.ValidationError) -> list[ValidationIssue]:
    return [
        ValidationIssue(
            path=".".join(str(part) for part in error["loc"]), message=error["msg"]
        )
        for error in exc.errors()
    ]


def _msgspec_issue(exc: msgspec.ValidationError) -> ValidationIssue:
    """Split msgspec's ``"<message> - at `$.a[0].b`"`` into path and message."""
    message, _, location = str(exc).partition(" - at ")
    path = location.strip("`").removeprefix("$").lstrip(".")
    return ValidationIssue(path=path, message=message)


def validate(schema: typ.Any, data: typ.Any) -> list[ValidationIssue]:
    """Validate ``data`` against ``schema``.

    Parameters
    ----------
    schema : object
        A supported schema object (see module documentation).
    data : object
        The value to validate, usually a page data mapping.

    Returns
    -------
    list[ValidationIssue]
        Empty when ``data`` is valid.

    Raises
    ------
    TypeError
        If ``schema`` is not a supported schema object.
    """
    try:
        if isinstance(schema, type) and issubclass(schema, pydantic.BaseModel):
            schema.model_validate(data)
        elif isinstance(schema, pydantic.TypeAdapter):
            schema.validate_python(data)
        elif isinstance(schema, type) and issubclass(schema, msgspec.Struct):
            msgspec.convert(data, schema)
        elif callable(getattr(schema, "parse", None)):
            schema.parse(data)
        else:
            msg = f"Unsupported schema object: {schema!r}"
            raise TypeError(msg)
    except pydantic.ValidationError as exc:
        return _pydantic_issues(exc)
    except msgspec.ValidationError as exc:
        return [_msgspec_issue(exc)]
    except ValueError as exc:
        return [ValidationIssue(path="", message=str(exc))]
    return []


def ensure_valid(schema: typ.Any, data: typ.Any, *, route_path: str) -> None:
    """Raise :class:`SchemaValidationError` when ``data`` violates ``schema``."""
    issues = validate(schema, data)
    if issues:
        raise SchemaValidationError(route_path, issues)


__all__ = ["ValidationIssue", "ensure_valid", "validate"]
