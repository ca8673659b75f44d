"""Authentication variants.

``inherit`` defers to the collection or folder settings; ``none`` disables
authentication explicitly. Both carry no fields.
"""

from __future__ import annotations

from typing import Annotated, Literal

from pydantic import Field

from bru_to_oc.models.common import FrozenModel


class BearerAuth(FrozenModel):
    type: Literal["bearer"] = "bearer"
    token: str = ""
    prefix: str | None = None


class BasicAuth(FrozenModel):
    """HTTP basic authentication.

    Example:
    -------
        ```yaml
        auth:
          type: basic
          username: admin
          password: secret
        ```

    """

    type: Literal["basic"] = "basic"
    username: str = ""
    password: str = ""


class OAuth2Auth(FrozenModel):
    type: Literal["oauth2"] = "oauth2"
    access_token: Annotated[str, Field(default="", alias="accessToken")]
    token_type: Annotated[str | None, Field(default=None, alias="tokenType")]
    refresh_token: Annotated[str | None, Field(default=None, alias="refreshToken")]


class AwsV4Auth(FrozenModel):
    """AWS Signature Version 4."""

    type: Literal["awsv4"] = "awsv4"
    access_key_id: Annotated[str, Field(default="", alias="accessKeyId")]
    secret_access_key: Annotated[str, Field(default="", alias="secretAccessKey")]
    region: str = ""
    service: str = ""
    session_token: Annotated[str | None, Field(default=None, alias="sessionToken")]


class DigestAuth(FrozenModel):
    type: Literal["digest"] = "digest"
    username: str = ""
    password: str = ""
    realm: str | None = None


class ApiKeyAuth(FrozenModel):
    type: Literal["apikey"] = "apikey"
    key: str = ""
    value: str = ""
    placement: Annotated[
        Literal["header", "query"],
        Field(default="header", description="Send the key as a header or a query parameter"),
    ]


class InheritAuth(FrozenModel):
    type: Literal["inherit"] = "inherit"


class NoAuth(FrozenModel):
    type: Literal["none"] = "none"


Auth = Annotated[
    BearerAuth
    | BasicAuth
    | OAuth2Auth
    | AwsV4Auth
    | DigestAuth
    | ApiKeyAuth
    | InheritAuth
    | NoAuth,
    Field(discriminator="type"),
]
