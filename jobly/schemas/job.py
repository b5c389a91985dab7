from pydantic import BaseModel, Field, field_validator
from typing import Optional

from jobly.schemas.company import CompanyResponse


class JobCreateRequest(BaseModel):
    """Schema for creating a new job"""
    title: str = Field(..., min_length=1)
    salary: Optional[int] = Field(None, ge=0)
    equity: Optional[float] = Field(None, ge=0, le=1)
    company_handle: str = Field(..., min_length=1, max_length=25, alias="companyHandle")

    class Config:
        populate_by_name = True
        extra = "forbid"


class JobUpdateRequest(BaseModel):
    """
    Schema for a partial job update.

    A job's id and company are fixed; sending either is a validation error.
    """
    title: Optional[str] = Field(None, min_length=1)
    salary: Optional[int] = Field(None, ge=0)
    equity: Optional[float] = Field(None, ge=0, le=1)

    class Config:
        extra = "forbid"

    @field_validator('title')
    @classmethod
    def reject_null_title(cls, v):
        """Salary and equity may be cleared; the title may not."""
        if v is None:
            raise ValueError('title cannot be null')
        return v


class JobFilterQuery(BaseModel):
    """Query string filters for listing jobs"""
    title: Optional[str] = Field(None, min_length=1)
    min_salary: Optional[int] = Field(None, ge=0, alias="minSalary")
    has_equity: Optional[bool] = Field(None, alias="hasEquity")

    class Config:
        populate_by_name = True
        extra = "forbid"


class JobResponse(BaseModel):
    """Schema for job response"""
    id: int
    title: str
    salary: Optional[int] = None
    equity: Optional[float] = None
    company_handle: str = Field(..., alias="companyHandle")

    class Config:
        from_attributes = True  # Allows conversion from SQLAlchemy models
        populate_by_name = True


class JobDetailResponse(BaseModel):
    """Job with the company that posted it"""
    id: int
    title: str
    salary: Optional[int] = None
    equity: Optional[float] = None
    company: CompanyResponse

    class Config:
        from_attributes = True
