import logging
from typing import Any, Dict
from fastapi import APIRouter, Depends, Request
from fastapi.exceptions import RequestValidationError
from pydantic import ValidationError
from sqlalchemy.orm import Session

from jobly.core.database import get_db
from jobly.core.deps import ensure_admin
from jobly.crud import job as job_crud
from jobly.schemas.job import (
    JobCreateRequest,
    JobDetailResponse,
    JobFilterQuery,
    JobResponse,
    JobUpdateRequest,
)

router = APIRouter(prefix="/jobs", tags=["Jobs"])
logger = logging.getLogger(__name__)


def job_filters(request: Request) -> Dict[str, Any]:
    """Validate the query string into API-named filters, in declared order."""
    try:
        query = JobFilterQuery.model_validate(dict(request.query_params))
    except ValidationError as e:
        raise RequestValidationError(e.errors(include_url=False))
    return query.model_dump(exclude_none=True, by_alias=True)


@router.post("/", status_code=201, response_model=JobResponse)
def create_job(
    request: JobCreateRequest,
    db: Session = Depends(get_db),
    admin=Depends(ensure_admin)
):
    """Create a job for an existing company. Admin only."""
    return job_crud.create(db, request)


@router.get("/", response_model=list[JobResponse])
def list_jobs(
    filters: Dict[str, Any] = Depends(job_filters),
    db: Session = Depends(get_db)
):
    """
    List jobs ordered by title.

    Optional filters:
    - title: case-insensitive substring of the job title
    - minSalary: salary strictly above this value
    - hasEquity: true keeps only jobs offering equity
    """
    return job_crud.find_all(db, filters)


# job_id stays a string here so the repository decides what a valid id is
@router.get("/{job_id}", response_model=JobDetailResponse)
def get_job(job_id: str, db: Session = Depends(get_db)):
    """Retrieve a job and the company that posted it."""
    return job_crud.get(db, job_id)


@router.patch("/{job_id}", response_model=JobResponse)
def update_job(
    job_id: str,
    request: JobUpdateRequest,
    db: Session = Depends(get_db),
    admin=Depends(ensure_admin)
):
    """Partially update a job's title, salary or equity. Admin only."""
    data = request.model_dump(exclude_unset=True)
    return job_crud.update(db, job_id, data)


@router.delete("/{job_id}")
def delete_job(
    job_id: str,
    db: Session = Depends(get_db),
    admin=Depends(ensure_admin)
):
    """Delete a job. Admin only."""
    job_crud.remove(db, job_id)
    return {"deleted": job_id}
