from pydantic import BaseModel, Field, field_validator, model_validator
from datetime import datetime
from typing import Optional
from constants import StudentStatus


def _not_null(value):
    # Runs only for values actually sent; omitted fields keep their default
    if value is None:
        raise ValueError("may be omitted but not null")
    return value

# 1. PARENTS
class ParentCreate(BaseModel):
    name: str = Field(min_length=1, max_length=100)
    phone: str = Field(min_length=1, max_length=30)
    address: Optional[str] = None

class ParentUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    phone: Optional[str] = Field(default=None, min_length=1, max_length=30)
    address: Optional[str] = None

    @field_validator("name", "phone")
    @classmethod
    def not_null(cls, value):
        return _not_null(value)

class ParentSchema(BaseModel):
    id: int
    name: str
    phone: str
    address: Optional[str] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True

# 2. CLASSES
class ClassCreate(BaseModel):
    class_name: str = Field(min_length=1, max_length=50)
    description: Optional[str] = None

class ClassUpdate(BaseModel):
    class_name: Optional[str] = Field(default=None, min_length=1, max_length=50)
    description: Optional[str] = None

    @field_validator("class_name")
    @classmethod
    def not_null(cls, value):
        return _not_null(value)

class ClassSchema(BaseModel):
    id: int
    class_name: str
    description: Optional[str] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True

# 3. STUDENTS
class StudentCreate(BaseModel):
    student_name: str = Field(min_length=1, max_length=100)
    parent_id: int
    class_id: int
    fee: float = Field(ge=0)
    discount: float = Field(default=0, ge=0)
    status: StudentStatus = StudentStatus.ACTIVE

    @model_validator(mode="after")
    def discount_within_fee(self):
        if self.discount > self.fee:
            raise ValueError("discount cannot exceed fee")
        return self

class StudentUpdate(BaseModel):
    # discount <= fee is checked against the stored row in the repository
    student_name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    parent_id: Optional[int] = None
    class_id: Optional[int] = None
    fee: Optional[float] = Field(default=None, ge=0)
    discount: Optional[float] = Field(default=None, ge=0)
    status: Optional[StudentStatus] = None

    @field_validator("student_name", "parent_id", "class_id", "fee", "discount", "status")
    @classmethod
    def not_null(cls, value):
        return _not_null(value)

class StudentSchema(BaseModel):
    id: int
    student_name: str
    parent_id: int
    class_id: int
    fee: float
    discount: float
    status: StudentStatus
    created_at: Optional[datetime] = None
    parent_val: Optional[ParentSchema] = None
    class_val: Optional[ClassSchema] = None

    class Config:
        from_attributes = True
