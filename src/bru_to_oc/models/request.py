"""Root of the canonical request model."""

from __future__ import annotations

from typing import Annotated

from pydantic import Field

from bru_to_oc.models.auth import Auth
from bru_to_oc.models.body import Body
from bru_to_oc.models.common import FrozenModel
from bru_to_oc.models.http import Header, Param
from bru_to_oc.models.runtime import Runtime


class Info(FrozenModel):
    """Request identification.

    Example:
    -------
        ```yaml
        info:
          name: get-users
          type: http
          seq: 1
        ```

    """

    name: Annotated[str, Field(default="untitled", description="Display name")]
    type: Annotated[str, Field(default="http", description="Request type (http, graphql)")]
    seq: Annotated[int | None, Field(default=None, description="Position within its folder")]
    tags: Annotated[tuple[str, ...] | None, Field(default=None, description="Free-form tags")]


class Http(FrozenModel):
    """Method, URL and payload of the request."""

    method: Annotated[str, Field(min_length=1, description="Lower-case HTTP method")]
    url: Annotated[str, Field(description="Request URL, templates kept verbatim")]
    headers: tuple[Header, ...] | None = None
    params: tuple[Param, ...] | None = None
    body: Body | None = None
    auth: Auth | None = None


class Settings(FrozenModel):
    encode_url: Annotated[bool | None, Field(default=None, alias="encodeUrl")]
    timeout: Annotated[int | None, Field(default=None, ge=0, description="Timeout in ms")]
    follow_redirects: Annotated[bool | None, Field(default=None, alias="followRedirects")]

    @property
    def is_empty(self) -> bool:
        return self.encode_url is None and self.timeout is None and self.follow_redirects is None


class Docs(FrozenModel):
    description: str | None = None
    content: str | None = None


class Request(FrozenModel):
    """A single API request, independent of its file format.

    This is the pivot between the `.bru` format and OpenCollection YAML:
    the forward path builds it from a parsed Document, the reverse path
    builds it from YAML text.

    Model Hierarchy:
        Request
        ├── Info - name, type, sequence, tags
        ├── Http - method, url, headers, params, body, auth
        ├── Settings - encodeUrl, timeout, followRedirects (optional)
        ├── Runtime - scripts, assertions, vars (optional)
        └── Docs - free-form documentation (optional)

    """

    info: Info = Field(default_factory=Info)
    http: Http
    settings: Settings | None = None
    runtime: Runtime | None = None
    docs: Docs | None = None
    comments: Annotated[
        tuple[str, ...],
        Field(default=(), description="Top-level source comments, emitted on request"),
    ]
