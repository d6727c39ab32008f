from fastapi import APIRouter, Depends

from signoff.api.deps import require_user
from signoff.schemas.review import RoleRead
from signoff.services.role import match_role

router = APIRouter(prefix="/api/role", tags=["role"])


@router.get("", response_model=RoleRead)
def get_role(user: dict = Depends(require_user)) -> dict:
    return match_role(user["email"])
