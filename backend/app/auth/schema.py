from pydantic import EmailStr, Field

from ..models import CustomModel
from ..users.schema import UserPublic


class LoginRequest(CustomModel):
    email: EmailStr = Field(..., json_schema_extra={"example": "admin@conectar.com"})
    password: str = Field(..., min_length=1, json_schema_extra={"example": "admin123"})

class RegisterRequest(CustomModel):
    name: str = Field(..., min_length=1, max_length=100, json_schema_extra={"example": "João Silva"})
    email: EmailStr = Field(..., json_schema_extra={"example": "joao@example.com"})
    password: str = Field(..., min_length=6, json_schema_extra={"example": "senhaSegura123"})

class LoginResult(CustomModel):
    user: UserPublic
    token: str
