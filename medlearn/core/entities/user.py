from pydantic import BaseModel, Field

from medlearn.core.enums import UserRole


class CurrentUser(BaseModel):
    user_id: int = Field(ge=1)
    role: UserRole = Field(default=UserRole.VISITOR)

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN
