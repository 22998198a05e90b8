from pydantic import BaseModel

ROLE_USER = "ROLE_USER"
ROLE_ADMIN = "ROLE_ADMIN"


class Principal(BaseModel):
    token_hint: str
    role: str

    @property
    def is_admin(self) -> bool:
        return self.role == ROLE_ADMIN
