"""
CRUD operations for the Job model.
"""

import logging
from typing import Any, List, Mapping, Optional

from sqlalchemy import text
from sqlalchemy.orm import Session

from jobly.core.exceptions import BadRequestError, InvalidReferenceError, NotFoundError
from jobly.core.sql import (
    FREE_TEXT_FILTERS,
    like_pattern,
    operators_for_dialect,
    sql_filter_select,
    sql_for_partial_update,
    to_named_params,
)
from jobly.models.company import Company
from jobly.models.job import Job
from jobly.schemas.job import JobCreateRequest

logger = logging.getLogger(__name__)

FILTER_COLUMNS = {
    "title": "title",
    "minSalary": "salary",
    "hasEquity": "equity",
}

# Job fields share their column names
UPDATE_COLUMNS: Mapping[str, str] = {}

# jobs.id is a 32-bit INTEGER
MAX_JOB_ID = 2**31 - 1


def _parse_id(job_id: Any) -> int:
    try:
        parsed = int(job_id)
    except (TypeError, ValueError):
        raise BadRequestError(f"Job id must be a number: {job_id}")

    if not 1 <= parsed <= MAX_JOB_ID:
        raise BadRequestError(f"Job id out of range: {job_id}")
    return parsed


def create(db: Session, job_data: JobCreateRequest) -> Job:
    """
    Create a new job for an existing company.

    Raises:
        InvalidReferenceError: If ``company_handle`` names no company
    """
    company = db.query(Company).filter(Company.handle == job_data.company_handle).first()
    if not company:
        raise InvalidReferenceError(f"Company with handle {job_data.company_handle} does not exist")

    db_job = Job(
        title=job_data.title,
        salary=job_data.salary,
        equity=job_data.equity,
        company_handle=job_data.company_handle
    )

    db.add(db_job)
    db.commit()
    db.refresh(db_job)

    logger.info(f"Created job {db_job.id}: {db_job.title} at {db_job.company_handle}")
    return db_job


def find_all(db: Session, filters: Optional[Mapping[str, Any]] = None) -> List[Job]:
    """
    List jobs ordered by title, optionally filtered.

    Args:
        db: Database session
        filters: Any of {title, minSalary, hasEquity}. ``hasEquity=True``
            keeps only jobs with equity above zero; ``False`` does not filter.

    Returns:
        Matching jobs; an empty list when nothing matches
    """
    where_clause = ""
    values: List[Any] = []

    dialect_name = db.get_bind().dialect.name

    # Work on a copy; the caller's mapping is left as it was
    search = {}
    for key, value in (filters or {}).items():
        if key == "hasEquity":
            if not value:
                continue
            value = 0
        elif key in FREE_TEXT_FILTERS:
            value = like_pattern(value, dialect_name)
        search[key] = value

    if search:
        js_to_sql = {key: FILTER_COLUMNS[key] for key in search if key in FILTER_COLUMNS}
        operators = operators_for_dialect(dialect_name)
        clause, values = sql_filter_select(search, js_to_sql, operators)
        where_clause = f"WHERE {clause}"

    sql, params = to_named_params(
        f"""SELECT id, title, salary, equity, company_handle
            FROM jobs
            {where_clause}
            ORDER BY title""",
        values
    )
    return db.query(Job).from_statement(text(sql)).params(**params).all()


def get(db: Session, job_id: Any) -> Job:
    """
    Retrieve a job by id; its company loads through ``Job.company``.

    Raises:
        BadRequestError: If ``job_id`` is not an integer
        NotFoundError: If no such job
    """
    job = db.query(Job).filter(Job.id == _parse_id(job_id)).first()
    if not job:
        raise NotFoundError(f"No job: {job_id}")
    return job


def get_by_company_handle(db: Session, handle: str) -> List[Job]:
    """List a company's jobs by id; empty if it has none."""
    return db.query(Job).filter(Job.company_handle == handle).order_by(Job.id).all()


def update(db: Session, job_id: Any, data: Mapping[str, Any]) -> Job:
    """
    Partially update a job's title, salary or equity.

    Raises:
        BadRequestError: If ``job_id`` is not an integer or ``data`` is empty
        NotFoundError: If no such job
    """
    parsed_id = _parse_id(job_id)
    set_cols, values = sql_for_partial_update(data, UPDATE_COLUMNS)
    id_idx = f"${len(values) + 1}"

    sql, params = to_named_params(
        f"""UPDATE jobs
            SET {set_cols}
            WHERE id = {id_idx}
            RETURNING id""",
        [*values, parsed_id]
    )
    row = db.execute(text(sql), params).first()

    if row is None:
        db.rollback()
        raise NotFoundError(f"No job: {job_id}")

    db.commit()
    logger.info(f"Updated job {parsed_id}: {', '.join(data)}")
    return get(db, parsed_id)


def remove(db: Session, job_id: Any) -> None:
    """
    Delete a job.

    Raises:
        BadRequestError: If ``job_id`` is not an integer
        NotFoundError: If no such job
    """
    job = get(db, job_id)
    db.delete(job)
    db.commit()
    logger.info(f"Deleted job {job.id}")
