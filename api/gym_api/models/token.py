from pydantic import BaseModel, Field, StrictStr
from typing import Literal

SUPER_ADMIN = "super_admin"
TRAINER = "trainer"

Role = Literal["super_admin", "trainer"]


class TokenPayload(BaseModel):
    """Identity claims carried inside a signed token.

    Claim names are the wire names (``userId``); Python code uses the
    snake_case attributes. Strict string types mean a numeric ``userId`` or a
    missing ``name`` invalidates the whole payload.
    """
    user_id: StrictStr = Field(..., alias="userId")
    email: StrictStr
    role: Role
    name: StrictStr

    class Config:
        populate_by_name = True
        frozen = True

    def to_claims(self) -> dict:
        return self.model_dump(by_alias=True)
