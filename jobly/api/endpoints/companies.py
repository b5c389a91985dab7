import logging
from typing import Any, Dict
from fastapi import APIRouter, Depends, Request
from fastapi.exceptions import RequestValidationError
from pydantic import ValidationError
from sqlalchemy.orm import Session

from jobly.core.database import get_db
from jobly.core.deps import ensure_admin
from jobly.core.exceptions import BadRequestError
from jobly.crud import company as company_crud
from jobly.schemas.company import (
    CompanyCreateRequest,
    CompanyDetailResponse,
    CompanyFilterQuery,
    CompanyResponse,
    CompanyUpdateRequest,
)

router = APIRouter(prefix="/companies", tags=["Companies"])
logger = logging.getLogger(__name__)


def company_filters(request: Request) -> Dict[str, Any]:
    """Validate the query string into API-named filters, in declared order."""
    try:
        query = CompanyFilterQuery.model_validate(dict(request.query_params))
    except ValidationError as e:
        raise RequestValidationError(e.errors(include_url=False))

    if (
        query.min_employees is not None
        and query.max_employees is not None
        and query.min_employees > query.max_employees
    ):
        raise BadRequestError("minEmployees cannot be greater than maxEmployees")

    return query.model_dump(exclude_none=True, by_alias=True)


@router.post("/", status_code=201, response_model=CompanyResponse)
def create_company(
    request: CompanyCreateRequest,
    db: Session = Depends(get_db),
    admin=Depends(ensure_admin)
):
    """Create a company. Admin only."""
    return company_crud.create(db, request)


@router.get("/", response_model=list[CompanyResponse])
def list_companies(
    filters: Dict[str, Any] = Depends(company_filters),
    db: Session = Depends(get_db)
):
    """
    List companies ordered by name.

    Optional filters:
    - name: case-insensitive substring of the company name
    - minEmployees / maxEmployees: bounds on the headcount
    """
    return company_crud.find_all(db, filters)


@router.get("/{handle}", response_model=CompanyDetailResponse)
def get_company(handle: str, db: Session = Depends(get_db)):
    """Retrieve a company and its jobs."""
    return company_crud.get(db, handle)


@router.patch("/{handle}", response_model=CompanyResponse)
def update_company(
    handle: str,
    request: CompanyUpdateRequest,
    db: Session = Depends(get_db),
    admin=Depends(ensure_admin)
):
    """Partially update a company. Admin only."""
    data = request.model_dump(exclude_unset=True, by_alias=True)
    return company_crud.update(db, handle, data)


@router.delete("/{handle}")
def delete_company(
    handle: str,
    db: Session = Depends(get_db),
    admin=Depends(ensure_admin)
):
    """Delete a company and its jobs. Admin only."""
    company_crud.remove(db, handle)
    return {"deleted": handle}
