"""
Manual entitlement grants - admin only.
"""
import logging
from typing import List
from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from app.database import get_db
from app.dependencies import get_catalog_store, get_entitlement_store, get_identity_directory
from app.models.enrollment import EnrollmentSource
from app.models.user import UserRole
from app.schemas.courses import EnrollmentGrant, EnrollmentResponse
from app.auth.dependencies import require_role
from app.services.catalog import CatalogStore
from app.services.enrollment import EntitlementStore
from app.services.errors import StoreError
from app.services.identity import IdentityDirectory

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/admin/enrollments", tags=["Admin Enrollments"])

admin_only = require_role(UserRole.ADMIN)


@router.get("", response_model=List[EnrollmentResponse])
def list_enrollments(
    course_id: int = Query(..., description="Course to list enrollments for"),
    entitlements: EntitlementStore = Depends(get_entitlement_store),
    _: None = Depends(admin_only),
):
    return entitlements.list_for_course(course_id)


@router.post("", status_code=status.HTTP_201_CREATED)
def grant_enrollment(
    data: EnrollmentGrant,
    db: Session = Depends(get_db),
    identity: IdentityDirectory = Depends(get_identity_directory),
    catalog: CatalogStore = Depends(get_catalog_store),
    entitlements: EntitlementStore = Depends(get_entitlement_store),
    _: None = Depends(admin_only),
):
    """Grant access to a course. Granting an existing enrollment is a no-op."""
    if identity.get(data.user_id) is None:
        raise HTTPException(status_code=404, detail="User not found")
    if catalog.get_course(data.course_id) is None:
        raise HTTPException(status_code=404, detail="Course not found")

    try:
        entitlements.upsert(data.user_id, data.course_id, source=EnrollmentSource.MANUAL)
    except StoreError:
        db.rollback()
        logger.exception("Manual enrollment failed for user %s course %s", data.user_id, data.course_id)
        raise HTTPException(status_code=500, detail="Enrollment failed")
    db.commit()
    return {"user_id": data.user_id, "course_id": data.course_id, "message": "Enrollment granted"}
