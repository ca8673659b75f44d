"""Pydantic models for the canonical request.

Every model is frozen and rejects unknown fields. YAML keys use camelCase
aliases (``accessKeyId``, ``followRedirects``...); Python code may use
either the field name or the alias.

Example:
-------
    >>> from bru_to_oc.models import Http, Info, Request
    >>> req = Request(info=Info(name="ping"), http=Http(method="get", url="https://x"))
    >>> req.http.method
    'get'

"""

from bru_to_oc.models.auth import (
    ApiKeyAuth,
    Auth,
    AwsV4Auth,
    BasicAuth,
    BearerAuth,
    DigestAuth,
    InheritAuth,
    NoAuth,
    OAuth2Auth,
)
from bru_to_oc.models.body import (
    TEXT_BODY_TYPES,
    Body,
    FormUrlEncodedBody,
    GraphQLBody,
    JsonBody,
    MultipartFormBody,
    SparqlBody,
    TextBody,
    XmlBody,
)
from bru_to_oc.models.common import FrozenModel, NamedValue
from bru_to_oc.models.http import FormField, Header, MultipartPart, Param, ParamType
from bru_to_oc.models.request import Docs, Http, Info, Request, Settings
from bru_to_oc.models.runtime import (
    Assertion,
    AssertionOperator,
    Runtime,
    Script,
    ScriptType,
    Var,
    VarScope,
)

__all__ = [
    # Request
    "Request",
    "Info",
    "Http",
    "Settings",
    "Docs",
    # HTTP parts
    "Header",
    "Param",
    "ParamType",
    "FormField",
    "MultipartPart",
    # Bodies
    "Body",
    "TEXT_BODY_TYPES",
    "JsonBody",
    "XmlBody",
    "TextBody",
    "SparqlBody",
    "GraphQLBody",
    "FormUrlEncodedBody",
    "MultipartFormBody",
    # Auth
    "Auth",
    "BearerAuth",
    "BasicAuth",
    "OAuth2Auth",
    "AwsV4Auth",
    "DigestAuth",
    "ApiKeyAuth",
    "InheritAuth",
    "NoAuth",
    # Runtime
    "Runtime",
    "Script",
    "ScriptType",
    "Assertion",
    "AssertionOperator",
    "Var",
    "VarScope",
    # Base
    "FrozenModel",
    "NamedValue",
]
