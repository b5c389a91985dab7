"""
Builders for parameterized SQL fragments.

Both builders translate API-facing (camelCase) field names into column
names and number the placeholders ``$1..$N`` in the order the keys were
given, so the returned values line up with the placeholders one-to-one.
They hold no state and never touch the database.

Column names come from translation tables written in application code.
User input only ever reaches the query through the returned values.
"""

import logging
import re
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, NamedTuple, Optional, Tuple

from jobly.core.exceptions import BadRequestError, InternalServerError

logger = logging.getLogger(__name__)

# Comparison operator per logical filter name; anything else compares with "="
FILTER_OPERATORS: Mapping[str, str] = MappingProxyType({
    "minEmployees": ">",
    "minSalary": ">",
    "hasEquity": ">",
    "maxEmployees": "<",
    "name": " ILIKE ",
    "title": " ILIKE ",
})

# SQLite has no ILIKE; its LIKE is case-insensitive for ASCII already
SQLITE_FILTER_OPERATORS: Mapping[str, str] = MappingProxyType({
    **FILTER_OPERATORS,
    "name": " LIKE ",
    "title": " LIKE ",
})

# Filters matched as substrings rather than exact values
FREE_TEXT_FILTERS = frozenset({"name", "title"})

# Dialects whose LIKE/ILIKE treat backslash as the escape character without an ESCAPE clause
_BACKSLASH_ESCAPE_DIALECTS = frozenset({"postgresql"})

_PLACEHOLDER = re.compile(r"\$(\d+)")


class SqlClause(NamedTuple):
    """A SQL fragment and the values for its ``$N`` placeholders, in order."""
    clause: str
    values: List[Any]


def operators_for_dialect(dialect_name: str) -> Mapping[str, str]:
    """Pick the operator table matching a SQLAlchemy dialect name."""
    if dialect_name == "sqlite":
        return SQLITE_FILTER_OPERATORS
    return FILTER_OPERATORS


def like_pattern(value: Any, dialect_name: str) -> str:
    """
    Wrap a free-text filter value for a substring match.

    ``%``, ``_`` and ``\\`` in the value are escaped so they match literally.
    SQLite has no default LIKE escape character, so there they keep their
    wildcard meaning.
    """
    term = str(value)
    if dialect_name in _BACKSLASH_ESCAPE_DIALECTS:
        term = term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{term}%"


def sql_for_partial_update(
    data_to_update: Optional[Mapping[str, Any]],
    js_to_sql: Optional[Mapping[str, str]]
) -> SqlClause:
    """
    Build the SET portion of an UPDATE from a partial set of fields.

    Fields missing from ``js_to_sql`` are used as column names verbatim, so
    an empty table is valid and means "no renaming".

    Example:
        >>> sql_for_partial_update(
        ...     {"firstName": "Aliya", "age": 32},
        ...     {"firstName": "first_name"},
        ... )
        SqlClause(clause='"first_name"=$1, "age"=$2', values=['Aliya', 32])

    Raises:
        BadRequestError: ``data_to_update`` is missing or empty
        InternalServerError: ``js_to_sql`` is missing
    """
    if not data_to_update:
        raise BadRequestError("No data")

    # js_to_sql always comes from our own code, so its absence is a server bug
    if js_to_sql is None:
        logger.error("sql_for_partial_update called without a translation table")
        raise InternalServerError()

    cols = [
        f'"{js_to_sql.get(name) or name}"=${idx}'
        for idx, name in enumerate(data_to_update, start=1)
    ]

    return SqlClause(", ".join(cols), list(data_to_update.values()))


def sql_filter_select(
    filters: Optional[Mapping[str, Any]],
    js_to_sql: Optional[Mapping[str, str]],
    operators: Mapping[str, str] = FILTER_OPERATORS
) -> SqlClause:
    """
    Build the WHERE portion of a SELECT, one comparison per filter ANDed together.

    Unlike updates, every filter needs exactly one entry in ``js_to_sql``:
    several filters may share a column (minEmployees and maxEmployees both
    read num_employees), so the table cannot be guessed from the names.

    Example:
        >>> sql_filter_select(
        ...     {"name": "net", "minEmployees": 3},
        ...     {"name": "name", "minEmployees": "num_employees"},
        ... )
        SqlClause(clause='"name" ILIKE $1 AND "num_employees">$2', values=['net', 3])

    Raises:
        BadRequestError: ``filters`` is missing or empty
        InternalServerError: ``js_to_sql`` is missing, empty, or does not
            match ``filters`` key for key
    """
    if not filters:
        raise BadRequestError("No data")

    if js_to_sql is None:
        logger.error("sql_filter_select called without a translation table")
        raise InternalServerError()

    if len(js_to_sql) == 0:
        logger.error("sql_filter_select called with an empty translation table")
        raise InternalServerError()

    if len(filters) != len(js_to_sql) or any(name not in js_to_sql for name in filters):
        logger.error(
            "Filter translation table %s does not match filters %s",
            sorted(js_to_sql), sorted(filters)
        )
        raise InternalServerError()

    cols = [
        f'"{js_to_sql[name]}"{operators.get(name, "=")}${idx}'
        for idx, name in enumerate(filters, start=1)
    ]

    return SqlClause(" AND ".join(cols), list(filters.values()))


def to_named_params(sql: str, values: List[Any]) -> Tuple[str, Dict[str, Any]]:
    """
    Rewrite ``$N`` placeholders as ``:pN`` bind names for ``sqlalchemy.text``.

    Returns the rewritten statement and the matching parameter dict.
    """
    named_sql = _PLACEHOLDER.sub(lambda match: f":p{match.group(1)}", sql)
    params = {f"p{idx}": value for idx, value in enumerate(values, start=1)}
    return named_sql, params
