from pydantic import BaseModel, Field, field_validator
from typing import List, Optional


class CompanyCreateRequest(BaseModel):
    """Schema for creating a new company"""
    handle: str = Field(..., min_length=1, max_length=25)
    name: str = Field(..., min_length=1)
    description: str
    num_employees: Optional[int] = Field(None, ge=0, alias="numEmployees")
    logo_url: Optional[str] = Field(None, alias="logoUrl")

    class Config:
        populate_by_name = True
        extra = "forbid"


class CompanyUpdateRequest(BaseModel):
    """Schema for a partial company update; the handle cannot change"""
    name: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = None
    num_employees: Optional[int] = Field(None, ge=0, alias="numEmployees")
    logo_url: Optional[str] = Field(None, alias="logoUrl")

    class Config:
        populate_by_name = True
        extra = "forbid"

    @field_validator('name', 'description')
    @classmethod
    def reject_null(cls, v):
        """Headcount and logo may be cleared; name and description may not."""
        if v is None:
            raise ValueError('Field cannot be null')
        return v


class CompanyFilterQuery(BaseModel):
    """Query string filters for listing companies"""
    name: Optional[str] = Field(None, min_length=1)
    min_employees: Optional[int] = Field(None, ge=0, alias="minEmployees")
    max_employees: Optional[int] = Field(None, ge=0, alias="maxEmployees")

    class Config:
        populate_by_name = True
        extra = "forbid"


class CompanyResponse(BaseModel):
    """Schema for company response"""
    handle: str
    name: str
    description: str
    num_employees: Optional[int] = Field(None, alias="numEmployees")
    logo_url: Optional[str] = Field(None, alias="logoUrl")

    class Config:
        from_attributes = True  # Allows conversion from SQLAlchemy models
        populate_by_name = True


class CompanyJobResponse(BaseModel):
    """Job as listed under its company"""
    id: int
    title: str
    salary: Optional[int] = None
    equity: Optional[float] = None

    class Config:
        from_attributes = True


class CompanyDetailResponse(CompanyResponse):
    """Company with its job openings"""
    jobs: List[CompanyJobResponse] = []
