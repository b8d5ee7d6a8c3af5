# ============================================================================
# booking_api/api/v1/api_key/common.py
# Helpers shared by the integration endpoints
# ============================================================================
import json
from typing import Optional, Type, TypeVar
from uuid import UUID

from fastapi import Request
from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.orm import Session

from booking_api.core.exceptions import ValidationError
from booking_api.models.staff import StaffMember
from booking_api.services.staff.staff_service import StaffService

ModelT = TypeVar("ModelT", bound=BaseModel)


async def read_body(request: Request, model: Type[ModelT]) -> ModelT:
    """Parse the JSON body into ``model``, reporting problems as ValidationError (400)"""
    raw = await request.body()
    try:
        data = json.loads(raw) if raw else {}
    except json.JSONDecodeError:
        raise ValidationError("Request body must be valid JSON")

    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object")

    try:
        return model.model_validate(data)
    except PydanticValidationError as e:
        raise ValidationError(
            "Invalid request body",
            errors={"fields": [".".join(str(p) for p in err["loc"]) for err in e.errors()]}
        )


def resolve_staff(db: Session, business_id: UUID, name: Optional[str]) -> Optional[StaffMember]:
    if not name or not name.strip():
        return None
    return StaffService.resolve_by_name(db, business_id, name)


def staff_ref(staff: Optional[StaffMember]) -> Optional[dict]:
    if staff is None:
        return None
    return {"id": str(staff.id), "name": staff.name}
