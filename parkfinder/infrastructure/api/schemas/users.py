from typing import Optional
from pydantic import BaseModel, Field, field_validator, ConfigDict


class UserBase(BaseModel):
    username: str = Field(..., min_length=1, max_length=50)
    name: str = Field(..., min_length=1, max_length=100)
    email: str = Field(..., max_length=254, pattern=r"^[^@\s]+@[^@\s]+\.[^@\s]+$")

    @field_validator('username', 'name')
    def strip_text(cls, v):  # pylint: disable=no-self-argument
        v = v.strip()
        if not v:
            raise ValueError("must not be blank")
        return v


class UserCreate(UserBase):
    pass


class UserUpdate(UserBase):
    id: int


class UserResponse(BaseModel):
    id: Optional[int] = None
    username: str
    name: str
    email: str

    model_config = ConfigDict(from_attributes=True)
