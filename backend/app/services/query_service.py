"""List query service shared by the exercise, workout and progress endpoints.

Turns the query string of a list request into a filtered, sorted and
paginated SQLAlchemy query.

Query string contract:
- ``select``: comma list of fields to return (``id`` is always included)
- ``sort``: comma list of fields, ``-field`` for descending
- ``page``: 1-based page number (default 1)
- ``limit``: page size (default from settings, clamped to MAX_PAGE_LIMIT)
- anything else is a filter: ``field=value`` or ``field[op]=value`` where
  op is one of eq, ne, gt, gte, lt, lte, in (comma separated values)

Each resource declares which fields may be filtered, sorted and selected in
a ``ResourceQuerySpec``; anything outside it is rejected.
"""

import logging
import math
import re
from collections import OrderedDict
from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import Any, Callable, Dict, FrozenSet, Iterable, List, Optional, Sequence, Tuple, Type

from pydantic import BaseModel
from sqlalchemy.orm import Query

from app.config import settings
from app.errors import FieldValidationError
from app.schemas.common import SQL_INT_MAX, ListResponse, PageRef

logger = logging.getLogger(__name__)

RESERVED_PARAMS = frozenset({"select", "sort", "page", "limit"})

# "weight" or "weight[gte]"
_FILTER_KEY = re.compile(r"^(?P<field>[A-Za-z_][\w.]*)(?:\[(?P<op>[A-Za-z]+)\])?$")


class FilterOperator(str, Enum):
    """Comparison operators accepted in filter keys."""
    EQ = "eq"
    NE = "ne"
    GT = "gt"
    GTE = "gte"
    LT = "lt"
    LTE = "lte"
    IN = "in"


EQUALITY_OPERATORS = frozenset({FilterOperator.EQ, FilterOperator.NE, FilterOperator.IN})
ALL_OPERATORS = frozenset(FilterOperator)


class InvalidQueryError(FieldValidationError):
    """Raised when a list query string cannot be turned into a query."""
    pass


# ============== Value parsers ==============

def parse_str(value: str) -> str:
    return value


def parse_int(value: str) -> int:
    parsed = int(value)
    if abs(parsed) > SQL_INT_MAX:
        raise ValueError(f"integer out of range: {value}")
    return parsed


def parse_float(value: str) -> float:
    parsed = float(value)
    if not math.isfinite(parsed):
        raise ValueError(f"not a finite number: {value}")
    return parsed


def parse_bool(value: str) -> bool:
    lowered = value.strip().lower()
    if lowered in ("true", "1", "yes"):
        return True
    if lowered in ("false", "0", "no"):
        return False
    raise ValueError(f"not a boolean: {value}")


def parse_date(value: str) -> date:
    return date.fromisoformat(value.strip()[:10])


def parse_datetime(value: str) -> datetime:
    text = value.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    parsed = datetime.fromisoformat(text)
    # Columns store naive UTC
    if parsed.tzinfo is not None:
        parsed = parsed.replace(tzinfo=None) - parsed.utcoffset()
    return parsed


def enum_parser(enum_cls: Type[Enum]) -> Callable[[str], Enum]:
    def parse(value: str) -> Enum:
        return enum_cls(value)
    return parse


# ============== Resource declarations ==============

@dataclass(frozen=True)
class FilterField:
    """A filterable field: the column, how to parse values, allowed operators.

    ``clause`` overrides clause construction for fields that are not plain
    columns (e.g. membership in a child collection).
    """

    column: Any
    parse: Callable[[str], Any] = parse_str
    operators: FrozenSet[FilterOperator] = EQUALITY_OPERATORS
    clause: Optional[Callable[[FilterOperator, Any], Any]] = None

    def build(self, operator: FilterOperator, value: Any):
        if self.clause is not None:
            return self.clause(operator, value)

        column = self.column
        if operator == FilterOperator.EQ:
            return column == value
        if operator == FilterOperator.NE:
            return column != value
        if operator == FilterOperator.GT:
            return column > value
        if operator == FilterOperator.GTE:
            return column >= value
        if operator == FilterOperator.LT:
            return column < value
        if operator == FilterOperator.LTE:
            return column <= value
        return column.in_(value)


@dataclass(frozen=True)
class ResourceQuerySpec:
    """What a list endpoint lets callers filter, sort and select."""

    filters: Dict[str, FilterField]
    sort_fields: Dict[str, Any]
    select_fields: FrozenSet[str]
    default_sort: str
    tie_breaker: Any


@dataclass
class FilterClause:
    field: str
    operator: FilterOperator
    value: Any


@dataclass
class ListParams:
    filters: List[FilterClause] = field(default_factory=list)
    sort: List[Tuple[str, bool]] = field(default_factory=list)  # (field, descending)
    select: Optional[List[str]] = None
    page: int = 1
    limit: int = 10


@dataclass
class ListPage:
    """One page of results plus what is needed to describe the neighbours."""

    items: list
    total: int
    page: int
    limit: int

    @property
    def pagination(self) -> Dict[str, PageRef]:
        pagination = {}
        if self.page * self.limit < self.total:
            pagination["next"] = PageRef(page=self.page + 1, limit=self.limit)
        if self.page > 1:
            pagination["prev"] = PageRef(page=self.page - 1, limit=self.limit)
        return pagination


def select_fields_of(schema: Type[BaseModel]) -> FrozenSet[str]:
    """Wire names of a response schema's fields."""
    generator = schema.model_config.get("alias_generator")
    names = set()
    for name, info in schema.model_fields.items():
        alias = info.alias or (generator(name) if callable(generator) else None)
        names.add(alias or name)
    return frozenset(names)


# ============== Parsing ==============

def _positive_int(raw: Optional[str], default: int) -> int:
    try:
        value = int(raw)
    except (TypeError, ValueError):
        return default
    return value if value > 0 else default


def _split_csv(values: Iterable[str]) -> List[str]:
    parts = []
    for value in values:
        parts.extend(part.strip() for part in value.split(",") if part.strip())
    return parts


def parse_list_params(
    query_items: Sequence[Tuple[str, str]],
    spec: ResourceQuerySpec,
    default_limit: Optional[int] = None,
    max_limit: Optional[int] = None,
) -> ListParams:
    """
    Parse raw query string pairs against a resource spec.

    Args:
        query_items: (key, value) pairs, repeated keys allowed
        spec: The resource's filter/sort/select declaration
        default_limit: Page size when none is given
        max_limit: Upper bound on the page size

    Returns:
        ListParams: Parsed filters, sort order, projection and page window

    Raises:
        InvalidQueryError: On unknown fields, unsupported operators or
            unparseable values. All problems are reported at once.
    """
    default_limit = default_limit or settings.DEFAULT_PAGE_LIMIT
    max_limit = max_limit or settings.MAX_PAGE_LIMIT

    grouped: "OrderedDict[str, List[str]]" = OrderedDict()
    for key, value in query_items:
        grouped.setdefault(key, []).append(value)

    errors: List[Dict[str, str]] = []
    params = ListParams()

    for key, values in grouped.items():
        if key in RESERVED_PARAMS:
            continue

        match = _FILTER_KEY.match(key)
        if not match:
            errors.append({"field": key, "message": f"Malformed filter '{key}'"})
            continue

        name = match.group("field")
        filter_field = spec.filters.get(name)
        if filter_field is None:
            errors.append({"field": name, "message": f"Unknown filter field '{name}'"})
            continue

        raw_op = (match.group("op") or FilterOperator.EQ.value).lower()
        try:
            operator = FilterOperator(raw_op)
        except ValueError:
            errors.append({"field": key, "message": f"Unknown operator '{raw_op}'"})
            continue

        if operator == FilterOperator.EQ and len(values) > 1:
            operator = FilterOperator.IN
        if operator not in filter_field.operators:
            errors.append({"field": key, "message": f"Operator '{operator.value}' is not supported for '{name}'"})
            continue

        raw_values = _split_csv(values) if operator == FilterOperator.IN else values
        parsed = []
        for raw in raw_values:
            try:
                parsed.append(filter_field.parse(raw))
            except (TypeError, ValueError):
                errors.append({"field": key, "message": f"Invalid value '{raw}' for '{name}'"})

        if operator == FilterOperator.IN:
            params.filters.append(FilterClause(name, operator, parsed))
        else:
            params.filters.extend(FilterClause(name, operator, value) for value in parsed)

    sort_raw = grouped.get("sort", [spec.default_sort])[-1]
    for token in _split_csv([sort_raw]) or [spec.default_sort]:
        descending = token.startswith("-")
        name = token.lstrip("-+")
        if name not in spec.sort_fields:
            errors.append({"field": "sort", "message": f"Cannot sort by '{name}'"})
            continue
        params.sort.append((name, descending))

    if "select" in grouped:
        selected = []
        for name in _split_csv(grouped["select"]):
            if name not in spec.select_fields:
                errors.append({"field": "select", "message": f"Cannot select '{name}'"})
            elif name not in selected:
                selected.append(name)
        params.select = selected

    if errors:
        raise InvalidQueryError(errors)

    params.page = _positive_int(grouped.get("page", [None])[-1], 1)
    params.limit = min(_positive_int(grouped.get("limit", [None])[-1], default_limit), max_limit)
    return params


# ============== Execution ==============

def apply_list_params(query: Query, spec: ResourceQuerySpec, params: ListParams) -> ListPage:
    """
    Run a scoped base query with the parsed filters, order and page window.

    The caller is responsible for the ownership scope of ``query``.
    A page past the end yields an empty item list, not an error.
    """
    for clause in params.filters:
        query = query.filter(spec.filters[clause.field].build(clause.operator, clause.value))

    total = query.order_by(None).count()

    order_by = []
    for name, descending in params.sort:
        column = spec.sort_fields[name]
        order_by.append(column.desc() if descending else column.asc())
    # Keep pages disjoint when sort keys tie
    last_descending = params.sort[-1][1] if params.sort else False
    order_by.append(spec.tie_breaker.desc() if last_descending else spec.tie_breaker.asc())

    offset = (params.page - 1) * params.limit
    if offset >= total:
        items = []
    else:
        items = query.order_by(*order_by).offset(offset).limit(params.limit).all()

    logger.debug(f"List query returned {len(items)} of {total} (page={params.page}, limit={params.limit})")
    return ListPage(items=items, total=total, page=params.page, limit=params.limit)


def project(item: Dict[str, Any], select: Optional[List[str]]) -> Dict[str, Any]:
    """Restrict a serialized item to the selected fields plus ``id``."""
    if not select:
        return item
    keep = ["id"] + [name for name in select if name != "id"]
    return {name: item[name] for name in keep if name in item}


def build_list_response(page: ListPage, schema: Type[BaseModel], select: Optional[List[str]]) -> ListResponse:
    """Serialize a page with ``schema`` and wrap it in the list envelope."""
    data = [
        project(schema.model_validate(item).model_dump(by_alias=True, mode="json"), select)
        for item in page.items
    ]
    return ListResponse(count=len(data), pagination=page.pagination, data=data)


def paginate(
    query: Query,
    query_items: Sequence[Tuple[str, str]],
    spec: ResourceQuerySpec,
    schema: Type[BaseModel],
) -> ListResponse:
    """Parse, run and serialize a list request in one step."""
    params = parse_list_params(query_items, spec)
    page = apply_list_params(query, spec, params)
    return build_list_response(page, schema, params.select)
