"""Site-wide settings stored as a single row (id = 1)."""

from sqlalchemy import Column, Integer, String, Boolean

from app.infrastructure.database import Base

APP_CONFIG_ID = 1


class AppConfig(Base):
    __tablename__ = "app_config"

    id = Column(Integer, primary_key=True, default=APP_CONFIG_ID)
    site_name = Column(String(255), nullable=False, default="Plateforme Cartographie")
    contact_email = Column(String(255), nullable=False, default="admin@esmt.sn")
    maintenance_mode = Column(Boolean, nullable=False, default=False)
    registration_open = Column(Boolean, nullable=False, default=True)
    version = Column(String(20), nullable=False, default="1.0.0")

    @classmethod
    def defaults(cls) -> "AppConfig":
        """Transient instance used when the row does not exist yet."""
        return cls(
            id=APP_CONFIG_ID,
            site_name="Plateforme Cartographie",
            contact_email="admin@esmt.sn",
            maintenance_mode=False,
            registration_open=True,
            version="1.0.0",
        )

    def __repr__(self):
        return f"<AppConfig maintenance={self.maintenance_mode} registration={self.registration_open}>"
