"""Field validators and the validation aggregator for product routes.

Each route declares an ordered sequence of ``FieldCheck`` objects. A check
reads one field from the path parameters or the JSON body, applies a pure
rule to it and yields a ``Violation`` when the rule fails. Checks are
independent: one malformed field can fail several of them in the same
request.

``validate`` runs every check of a route and returns either ``Invalid`` with
all violations, in declaration order, or ``Valid`` with the raw inputs. The
FastAPI dependency built by ``validated_input`` turns ``Invalid`` into a
``RequestValidationFailed`` error before the route handler runs.

Rules compare the text form of a value: absent or null fields are ``""``,
booleans are ``"true"``/``"false"`` and numbers are their decimal text, or
exponent form (``"1e+21"``) from 1e21 on.
"""

import math
import re
from collections.abc import Awaitable, Callable, Mapping, Sequence
from dataclasses import dataclass
from typing import Any, Final, Literal

import orjson
from fastapi import Request
from loguru import logger

from products_api.core.exceptions import RequestValidationFailed
from products_api.core.types import JsonObject, JsonValue

type Location = Literal["params", "body"]
type Rule = Callable[[JsonValue], bool]

ID_NOT_VALID: Final = "El ID no es válido"
NAME_EMPTY: Final = "El nombre del producto no puede estar vacío."
PRICE_NOT_NUMERIC: Final = "Valor no válido."
PRICE_EMPTY: Final = "El precio del producto no puede estar vacío."
PRICE_NOT_POSITIVE: Final = "El precio debe ser mayor a 0"
AVAILABILITY_NOT_BOOLEAN: Final = "Valor para disponibilidad no válido."

_INT_PATTERN = re.compile(r"[-+]?[0-9]+")
_NUMERIC_PATTERN = re.compile(r"[+-]?(?:[0-9]*[.])?[0-9]+")
# Numbers from this magnitude on are written in exponent form
_EXPONENT_THRESHOLD: Final = 1e21
_BOOLEAN_TEXTS = frozenset({"true", "false", "1", "0"})
_TRUE_TEXTS = frozenset({"true", "1"})

_MISSING: Final = object()


def as_text(value: JsonValue | object) -> str:
    """Return the text a rule inspects for ``value``."""
    if value is None or value is _MISSING:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, int) and abs(value) >= _EXPONENT_THRESHOLD:
        try:
            value = float(value)
        except OverflowError:
            return "Infinity" if value > 0 else "-Infinity"
    if isinstance(value, float):
        if value.is_integer() and abs(value) < _EXPONENT_THRESHOLD:
            return str(int(value))
        return repr(value)
    if isinstance(value, (dict, list)):
        return orjson.dumps(value).decode()
    return str(value)


def is_int(value: JsonValue) -> bool:
    """Whether the whole text is an optionally signed run of digits."""
    return _INT_PATTERN.fullmatch(as_text(value)) is not None


def is_numeric(value: JsonValue) -> bool:
    """Whether the whole text is a plain decimal number."""
    return _NUMERIC_PATTERN.fullmatch(as_text(value)) is not None


def is_not_empty(value: JsonValue) -> bool:
    """Whether the value has any text at all."""
    return as_text(value) != ""


def is_positive(value: JsonValue) -> bool:
    """Whether the value is a finite number greater than zero."""
    if isinstance(value, bool):
        return value
    try:
        number = float(as_text(value))
    except ValueError:
        return False
    return math.isfinite(number) and number > 0


def is_boolean(value: JsonValue) -> bool:
    """Whether the value reads as a boolean."""
    return as_text(value) in _BOOLEAN_TEXTS


def to_bool(value: JsonValue) -> bool:
    """Convert a value accepted by ``is_boolean``."""
    return as_text(value) in _TRUE_TEXTS


@dataclass(frozen=True)
class Violation:
    """A single field-level validation failure."""

    msg: str
    path: str
    location: Location
    value: Any = _MISSING

    def to_dict(self) -> dict[str, Any]:
        """Return the JSON shape sent to clients."""
        body: dict[str, Any] = {"type": "field"}
        if self.value is not _MISSING:
            body["value"] = self.value
        body.update(msg=self.msg, path=self.path, location=self.location)
        return body


@dataclass(frozen=True)
class FieldCheck:
    """One rule applied to one field, with the message reported on failure."""

    location: Location
    field: str
    rule: Rule
    message: str

    def run(self, sources: Mapping[Location, Mapping[str, Any]]) -> Violation | None:
        """Apply the rule to the field and return a violation if it fails."""
        value = sources[self.location].get(self.field, _MISSING)
        if self.rule(None if value is _MISSING else value):
            return None
        return Violation(self.message, self.field, self.location, value)


@dataclass(frozen=True)
class Valid:
    """Inputs of a request that passed every check."""

    params: Mapping[str, str]
    body: JsonObject

    @property
    def product_id(self) -> int:
        """The validated ``id`` path parameter."""
        return int(self.params["id"])


@dataclass(frozen=True)
class Invalid:
    """Every violation found in a request."""

    violations: list[Violation]


type ValidationResult = Valid | Invalid


# Rule chains per route, in the order their violations are reported
ID_CHECKS: Final = (FieldCheck("params", "id", is_int, ID_NOT_VALID),)

PRODUCT_BODY_CHECKS: Final = (
    FieldCheck("body", "name", is_not_empty, NAME_EMPTY),
    FieldCheck("body", "price", is_numeric, PRICE_NOT_NUMERIC),
    FieldCheck("body", "price", is_not_empty, PRICE_EMPTY),
    FieldCheck("body", "price", is_positive, PRICE_NOT_POSITIVE),
)

AVAILABILITY_CHECKS: Final = (
    FieldCheck("body", "availability", is_boolean, AVAILABILITY_NOT_BOOLEAN),
)

CREATE_CHECKS: Final = PRODUCT_BODY_CHECKS
REPLACE_CHECKS: Final = ID_CHECKS + PRODUCT_BODY_CHECKS + AVAILABILITY_CHECKS


def validate(
    checks: Sequence[FieldCheck],
    params: Mapping[str, str],
    body: JsonObject,
) -> ValidationResult:
    """Run every check and collect the violations.

    Args:
        checks: The route's checks, in declaration order.
        params: Path parameters of the request.
        body: Decoded JSON body of the request.

    Returns:
        ValidationResult: ``Invalid`` if any check failed, ``Valid`` otherwise.
    """
    sources: dict[Location, Mapping[str, Any]] = {"params": params, "body": body}
    violations = [v for check in checks if (v := check.run(sources)) is not None]
    if violations:
        return Invalid(violations)
    return Valid(params=params, body=body)


async def read_json_body(request: Request) -> JsonObject:
    """Decode the request body, treating anything but a JSON object as empty."""
    raw = await request.body()
    if not raw:
        return {}
    try:
        data = orjson.loads(raw)
    except orjson.JSONDecodeError:
        logger.debug("Ignoring request body that is not valid JSON")
        return {}
    return data if isinstance(data, dict) else {}


def validated_input(
    *checks: FieldCheck,
) -> Callable[[Request], Awaitable[Valid]]:
    """Build a dependency that validates a request before its handler runs.

    Args:
        *checks: The route's checks, in declaration order.

    Returns:
        A FastAPI dependency returning ``Valid`` or raising
        ``RequestValidationFailed`` with every violation.
    """

    async def dependency(request: Request) -> Valid:
        body = await read_json_body(request)
        result = validate(checks, dict(request.path_params), body)
        if isinstance(result, Invalid):
            raise RequestValidationFailed(result.violations)
        return result

    return dependency
