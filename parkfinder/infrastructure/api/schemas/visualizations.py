from typing import Optional
from pydantic import BaseModel, Field, ConfigDict


class CapacityDataCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100, description="Parking lot name")
    capacity: int = Field(..., ge=0, le=10000)
    available: int = Field(..., ge=0, le=10000)


class CapacityDataUpdate(CapacityDataCreate):
    id: int


class CapacityDataResponse(BaseModel):
    id: Optional[int] = None
    name: str
    capacity: int
    available: int
    percentage_available: int

    model_config = ConfigDict(from_attributes=True)


class UsageDataCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100, description="User type, e.g. Students")
    value: int = Field(..., ge=0, le=100, description="Share of parkers in percent")


class UsageDataUpdate(UsageDataCreate):
    id: int


class UsageDataResponse(BaseModel):
    id: Optional[int] = None
    name: str
    value: int

    model_config = ConfigDict(from_attributes=True)


class TrendDataCreate(BaseModel):
    time: str = Field(..., min_length=1, max_length=20, description="Time label, e.g. 8am")
    available: int = Field(..., ge=0, le=10000)


class TrendDataUpdate(TrendDataCreate):
    id: int


class TrendDataResponse(BaseModel):
    id: Optional[int] = None
    time: str
    available: int

    model_config = ConfigDict(from_attributes=True)
