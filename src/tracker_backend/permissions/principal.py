from typing import List, Optional
from pydantic import BaseModel, Field

from tracker_backend.api.exceptions import UnauthorizedException


class Principal(BaseModel):
    """Authenticated caller resolved from a bearer token"""

    user_id: Optional[str] = None
    username: Optional[str] = None
    email: Optional[str] = None
    roles: List[str] = Field(default_factory=list)

    def get_user_id_or_throw(self) -> str:
        if self.user_id is None:
            raise UnauthorizedException("User ID not found")
        return self.user_id
