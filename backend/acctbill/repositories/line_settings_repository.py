from uuid import UUID

from sqlalchemy.orm import Session

from acctbill.models.line_settings import LineSettings
from acctbill.schemas.line_settings import LineSettingsUpdate


class LineSettingsRepository:
    def __init__(self, db: Session):
        self.db = db

    def get_by_company(self, company_id: UUID) -> LineSettings | None:
        return self.db.query(LineSettings).filter(LineSettings.company_id == company_id).first()

    def get_active_access_token(self, company_id: UUID) -> str | None:
        """Return the channel access token if the company has active LINE credentials."""
        line_settings = self.get_by_company(company_id)
        if line_settings is None or not line_settings.is_active:
            return None
        return str(line_settings.channel_access_token) if line_settings.channel_access_token else None

    def upsert(self, company_id: UUID, data: LineSettingsUpdate) -> LineSettings:
        line_settings = self.get_by_company(company_id)
        if line_settings is None:
            line_settings = LineSettings(company_id=company_id)
            self.db.add(line_settings)
        for key, value in data.model_dump(exclude_unset=True).items():
            setattr(line_settings, key, value)
        self.db.commit()
        self.db.refresh(line_settings)
        return line_settings
