"""Single-row site settings."""

from sqlalchemy import Boolean, Column, Integer, false

from newsgate.database import Base, UTCDateTime, utcnow

SETTINGS_ROW_ID = 1


class SiteSettings(Base):
    __tablename__ = "site_settings"

    id = Column(Integer, primary_key=True, default=SETTINGS_ROW_ID)
    maintenance_mode = Column(Boolean, nullable=False, default=False, server_default=false())
    updated_at = Column(UTCDateTime(), default=utcnow, onupdate=utcnow)
