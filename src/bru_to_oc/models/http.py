"""Headers, parameters and form fields of an HTTP request."""

from __future__ import annotations

from enum import Enum
from typing import Annotated

from pydantic import Field

from bru_to_oc.models.common import NamedValue


class ParamType(str, Enum):
    """Where a parameter lives in the URL."""

    QUERY = "query"
    PATH = "path"


class Header(NamedValue):
    """A request header.

    Example:
    -------
        ```yaml
        headers:
          - name: Content-Type
            value: application/json
          - name: X-Debug
            value: "1"
            enabled: false
        ```

    """


class Param(NamedValue):
    """A query or path parameter."""

    type: Annotated[ParamType, Field(default=ParamType.QUERY, description="query or path")]


class FormField(NamedValue):
    """A field of a form-urlencoded body."""


class MultipartPart(NamedValue):
    """A part of a multipart-form body.

    File parts carry the path in both ``value`` and ``filename``.
    """

    filename: Annotated[str | None, Field(default=None, description="File to upload")]
    content_type: Annotated[
        str | None,
        Field(default=None, alias="contentType", description="Explicit part content type"),
    ]
