"""Site settings schemas."""

from pydantic import BaseModel


class SiteStatusResponse(BaseModel):
    maintenance_mode: bool
    updated_at: str | None


class UpdateSiteStatusRequest(BaseModel):
    maintenance_mode: bool
