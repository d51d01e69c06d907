"""
Request schemas

Each model validates one JSON request body. Unknown keys are rejected and
field names follow the camelCase the clients send.
"""
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

BloodGroup = Literal['A+', 'A-', 'B+', 'B-', 'AB+', 'AB-', 'O+', 'O-']


def _reject_bool(value):
    # JSON true/false would otherwise coerce to 1/0
    if isinstance(value, bool):
        raise ValueError('must be a number')
    return value


class RequestModel(BaseModel):
    model_config = ConfigDict(extra='forbid', populate_by_name=True, str_strip_whitespace=True)


class PatientCreate(RequestModel):
    name: str = Field(..., min_length=2, max_length=100)
    age: int = Field(..., ge=0, le=150)
    blood_group: BloodGroup = Field(..., alias='bloodGroup')
    contact: str = Field(..., min_length=10, max_length=15, pattern=r'^[0-9+\-\s()]+$')
    disease: str = Field(..., min_length=2, max_length=500)

    @field_validator('age', mode='before')
    @classmethod
    def age_not_bool(cls, value):
        return _reject_bool(value)


class Medicine(RequestModel):
    name: str = Field(..., min_length=2, max_length=100)
    dosage: str = Field(..., min_length=2, max_length=100)
    instructions: str = Field(..., min_length=2, max_length=500)


class PrescriptionCreate(RequestModel):
    visit_id: str = Field(..., min_length=1, alias='visitId')
    medicines: List[Medicine] = Field(..., min_length=1)
    notes: Optional[str] = Field(default=None, min_length=1, max_length=1000)


class BillCreate(RequestModel):
    visit_id: str = Field(..., min_length=1, alias='visitId')
    amount: float = Field(..., gt=0, allow_inf_nan=False)
    description: Optional[str] = Field(default=None, min_length=1, max_length=500)

    @field_validator('amount', mode='before')
    @classmethod
    def amount_not_bool(cls, value):
        return _reject_bool(value)


class LoginRequest(RequestModel):
    model_config = ConfigDict(extra='forbid', str_strip_whitespace=False)

    username: str = Field(..., min_length=1, max_length=80)
    password: str = Field(..., min_length=1)
