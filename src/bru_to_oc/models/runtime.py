"""Scripts, assertions and variables evaluated around a request."""

from __future__ import annotations

from enum import Enum
from typing import Annotated

from pydantic import Field

from bru_to_oc.models.common import FrozenModel


class ScriptType(str, Enum):
    """When a script runs."""

    BEFORE_REQUEST = "before-request"
    AFTER_RESPONSE = "after-response"
    TESTS = "tests"


class VarScope(str, Enum):
    """When a variable is set."""

    BEFORE_REQUEST = "before-request"
    AFTER_RESPONSE = "after-response"


class AssertionOperator(str, Enum):
    """Comparison applied by an assertion."""

    EQ = "eq"
    NEQ = "neq"
    CONTAINS = "contains"
    NOT_CONTAINS = "notContains"
    GT = "gt"
    LT = "lt"
    GTE = "gte"
    LTE = "lte"
    MATCHES = "matches"
    EXISTS = "exists"
    IS_NULL = "isNull"
    IS_STRING = "isString"
    IS_NUMBER = "isNumber"
    IS_BOOLEAN = "isBoolean"
    IS_JSON = "isJson"


class Script(FrozenModel):
    type: ScriptType
    code: str = ""
    enabled: bool = True


class Assertion(FrozenModel):
    """A response assertion.

    Example:
    -------
        ```yaml
        assertions:
          - expression: res.status
            operator: eq
            value: "200"
        ```

    """

    expression: Annotated[str, Field(description="Expression evaluated against the response")]
    operator: Annotated[AssertionOperator, Field(default=AssertionOperator.EQ)]
    value: Annotated[str, Field(default="", description="Expected value, empty for unary operators")]
    enabled: bool = True


class Var(FrozenModel):
    name: str
    value: str = ""
    scope: VarScope = VarScope.BEFORE_REQUEST
    enabled: bool = True


class Runtime(FrozenModel):
    """Runtime behaviour attached to a request.

    Omitted from a Request entirely when all three parts are empty.
    """

    scripts: tuple[Script, ...] | None = None
    assertions: tuple[Assertion, ...] | None = None
    vars: tuple[Var, ...] | None = None

    @property
    def is_empty(self) -> bool:
        return not (self.scripts or self.assertions or self.vars)
