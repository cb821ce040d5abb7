"""Site settings router (maintenance mode)."""

import logging

from fastapi import APIRouter, Depends, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from newsgate.auth.dependencies import require_admin
from newsgate.database import get_db, utcnow
from newsgate.errors import InternalError
from newsgate.models.site import SETTINGS_ROW_ID, SiteSettings
from newsgate.models.user import User
from newsgate.schemas.common import isoformat
from newsgate.schemas.site import SiteStatusResponse, UpdateSiteStatusRequest

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/settings", tags=["Settings"])


@router.get(
    "/status",
    response_model=SiteStatusResponse,
    status_code=status.HTTP_200_OK,
)
async def get_site_status(db: AsyncSession = Depends(get_db)) -> SiteStatusResponse:
    """Public maintenance flag. Defaults to off until an admin sets it."""
    row = await db.get(SiteSettings, SETTINGS_ROW_ID)
    if row is None:
        return SiteStatusResponse(maintenance_mode=False, updated_at=None)
    return SiteStatusResponse(
        maintenance_mode=row.maintenance_mode,
        updated_at=isoformat(row.updated_at),
    )


@router.put(
    "/status",
    response_model=SiteStatusResponse,
    status_code=status.HTTP_200_OK,
)
async def update_site_status(
    data: UpdateSiteStatusRequest,
    db: AsyncSession = Depends(get_db),
    admin: User = Depends(require_admin),
) -> SiteStatusResponse:
    row = await db.get(SiteSettings, SETTINGS_ROW_ID)
    if row is None:
        row = SiteSettings(id=SETTINGS_ROW_ID)
        db.add(row)
    row.maintenance_mode = data.maintenance_mode
    row.updated_at = utcnow()

    try:
        await db.commit()
    except SQLAlchemyError:
        logger.exception("Failed to update maintenance mode")
        await db.rollback()
        raise InternalError("Failed to update maintenance mode")

    logger.info("Maintenance mode set to %s by %s", data.maintenance_mode, admin.id)
    return SiteStatusResponse(
        maintenance_mode=row.maintenance_mode,
        updated_at=isoformat(row.updated_at),
    )
