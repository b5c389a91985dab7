"""
CRUD operations for the Company model.

Listing and partial updates go through the SQL clause builders in
``jobly.core.sql``; the rest uses the ORM directly.
"""

import logging
from typing import Any, List, Mapping, Optional

from sqlalchemy import text
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from jobly.core.exceptions import ConflictError, NotFoundError
from jobly.core.sql import (
    FREE_TEXT_FILTERS,
    like_pattern,
    operators_for_dialect,
    sql_filter_select,
    sql_for_partial_update,
    to_named_params,
)
from jobly.models.company import Company
from jobly.schemas.company import CompanyCreateRequest

logger = logging.getLogger(__name__)

# Logical filter name -> column; both employee bounds read the same column
FILTER_COLUMNS = {
    "name": "name",
    "minEmployees": "num_employees",
    "maxEmployees": "num_employees",
}

UPDATE_COLUMNS = {
    "numEmployees": "num_employees",
    "logoUrl": "logo_url",
}


def _name_taken(db: Session, name: Optional[str], handle: str) -> bool:
    """True when a company other than ``handle`` already uses ``name``."""
    if name is None:
        return False
    return db.query(Company).filter(Company.name == name, Company.handle != handle).first() is not None


def create(db: Session, company_data: CompanyCreateRequest) -> Company:
    """
    Create a new company.

    Raises:
        ConflictError: If the handle (or name) is already taken
    """
    duplicate = db.query(Company).filter(Company.handle == company_data.handle).first()
    if duplicate:
        raise ConflictError(f"Duplicate company: {company_data.handle}")

    db_company = Company(
        handle=company_data.handle,
        name=company_data.name,
        description=company_data.description,
        num_employees=company_data.num_employees,
        logo_url=company_data.logo_url
    )

    db.add(db_company)
    try:
        db.commit()
    except IntegrityError:
        # Lost a race with a concurrent create, or the name is taken
        db.rollback()
        raise ConflictError(f"Duplicate company: {company_data.handle}")
    db.refresh(db_company)

    logger.info(f"Created company {db_company.handle}")
    return db_company


def find_all(db: Session, filters: Optional[Mapping[str, Any]] = None) -> List[Company]:
    """
    List companies ordered by name, optionally filtered.

    Args:
        db: Database session
        filters: Any of {name, minEmployees, maxEmployees}. ``name`` matches
            case-insensitively anywhere in the company name.

    Returns:
        Matching companies; an empty list when nothing matches
    """
    where_clause = ""
    values: List[Any] = []

    if filters:
        dialect_name = db.get_bind().dialect.name
        js_to_sql = {key: FILTER_COLUMNS[key] for key in filters if key in FILTER_COLUMNS}
        search = {
            key: like_pattern(value, dialect_name) if key in FREE_TEXT_FILTERS else value
            for key, value in filters.items()
        }
        operators = operators_for_dialect(dialect_name)
        clause, values = sql_filter_select(search, js_to_sql, operators)
        where_clause = f"WHERE {clause}"

    sql, params = to_named_params(
        f"""SELECT handle, name, description, num_employees, logo_url
            FROM companies
            {where_clause}
            ORDER BY name""",
        values
    )
    return db.query(Company).from_statement(text(sql)).params(**params).all()


def get(db: Session, handle: str) -> Company:
    """
    Retrieve a company by handle; its jobs load through ``Company.jobs``.

    Raises:
        NotFoundError: If no such company
    """
    company = db.query(Company).filter(Company.handle == handle).first()
    if not company:
        raise NotFoundError(f"No company: {handle}")
    return company


def update(db: Session, handle: str, data: Mapping[str, Any]) -> Company:
    """
    Partially update a company with API-named fields
    (name, description, numEmployees, logoUrl).

    Raises:
        BadRequestError: If ``data`` is empty
        NotFoundError: If no such company
        ConflictError: If the new name is taken
    """
    set_cols, values = sql_for_partial_update(data, UPDATE_COLUMNS)
    handle_idx = f"${len(values) + 1}"

    if _name_taken(db, data.get("name"), handle):
        raise ConflictError(f"Duplicate company name: {data['name']}")

    sql, params = to_named_params(
        f"""UPDATE companies
            SET {set_cols}
            WHERE handle = {handle_idx}
            RETURNING handle""",
        [*values, handle]
    )
    try:
        row = db.execute(text(sql), params).first()
    except IntegrityError:
        db.rollback()
        # Another update took the name after the check above
        if _name_taken(db, data.get("name"), handle):
            raise ConflictError(f"Duplicate company name: {data['name']}")
        raise

    if row is None:
        db.rollback()
        raise NotFoundError(f"No company: {handle}")

    db.commit()
    logger.info(f"Updated company {handle}: {', '.join(data)}")
    return get(db, handle)


def remove(db: Session, handle: str) -> None:
    """
    Delete a company and its jobs.

    Raises:
        NotFoundError: If no such company
    """
    company = get(db, handle)
    db.delete(company)
    db.commit()
    logger.info(f"Deleted company {handle}")
