"""
Request bodies accepted by the hunt API.

Anything that fails here is rejected with a 400 before it reaches the game
services.
"""

from typing import Annotated, List, Union

from pydantic import BaseModel, ConfigDict, Field, StrictFloat, StrictInt, StrictStr, field_validator


PhoneNumber = Annotated[StrictInt, Field(ge=0, lt=10 ** 11)]


class RegisterRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    name: StrictStr = Field(..., min_length=1, max_length=25)
    phone_numbers: List[PhoneNumber] = Field(..., alias='phoneNumbers', min_length=2, max_length=6)
    secret_key: StrictStr = Field(..., alias='secretKey')

    @field_validator('name')
    @classmethod
    def strip_name(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError('name must not be blank')
        return value

    @field_validator('phone_numbers')
    @classmethod
    def distinct_numbers(cls, value: List[int]) -> List[int]:
        if len(set(value)) != len(value):
            raise ValueError('phone numbers must be distinct')
        return value


class LoginRequest(BaseModel):
    # JSON clients may send 123456.0; whole numbers only
    otp: Union[StrictInt, StrictFloat]

    @field_validator('otp')
    @classmethod
    def six_digit_code(cls, value) -> int:
        if isinstance(value, float) and not value.is_integer():
            raise ValueError('otp must be a whole number')
        value = int(value)
        if not 0 <= value < 10 ** 6:
            raise ValueError('otp must have at most six digits')
        return value


class AnswerRequest(BaseModel):
    answer: StrictStr


class RefuelRequest(BaseModel):
    coupon: StrictStr = Field(..., min_length=1)
