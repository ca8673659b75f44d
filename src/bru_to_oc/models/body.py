"""Request body variants.

The ``type`` field is the discriminator, matching the ``type:`` key written
under ``http.body`` in the YAML output.
"""

from __future__ import annotations

from typing import Annotated, Literal

from pydantic import Field

from bru_to_oc.models.common import FrozenModel
from bru_to_oc.models.http import FormField, MultipartPart


class JsonBody(FrozenModel):
    type: Literal["json"] = "json"
    data: str = ""


class XmlBody(FrozenModel):
    type: Literal["xml"] = "xml"
    data: str = ""


class TextBody(FrozenModel):
    type: Literal["text"] = "text"
    data: str = ""


class SparqlBody(FrozenModel):
    type: Literal["sparql"] = "sparql"
    data: str = ""


class GraphQLBody(FrozenModel):
    """A GraphQL query with optional variables.

    Example:
    -------
        ```yaml
        body:
          type: graphql
          query: |
            { users { id } }
          variables: |
            {"limit": 10}
        ```

    """

    type: Literal["graphql"] = "graphql"
    query: str = ""
    variables: str | None = None
    operation_name: Annotated[str | None, Field(default=None, alias="operationName")]


class FormUrlEncodedBody(FrozenModel):
    type: Literal["form-urlencoded"] = "form-urlencoded"
    fields: tuple[FormField, ...] = ()


class MultipartFormBody(FrozenModel):
    type: Literal["multipart-form"] = "multipart-form"
    parts: tuple[MultipartPart, ...] = ()


TEXT_BODY_TYPES = (JsonBody, XmlBody, TextBody, SparqlBody)

Body = Annotated[
    JsonBody
    | XmlBody
    | TextBody
    | SparqlBody
    | GraphQLBody
    | FormUrlEncodedBody
    | MultipartFormBody,
    Field(discriminator="type"),
]
