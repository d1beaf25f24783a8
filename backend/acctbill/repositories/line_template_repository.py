from uuid import UUID

from sqlalchemy.orm import Session

from acctbill.models.line_template import LineTemplate
from acctbill.schemas.line_template import LineTemplateCreate, LineTemplateUpdate
from acctbill.services.message_template import extract_placeholders


class LineTemplateRepository:
    def __init__(self, db: Session):
        self.db = db

    def get_all(
        self,
        company_id: UUID,
        is_active: bool | None = None,
        category: str | None = None,
    ) -> list[LineTemplate]:
        query = self.db.query(LineTemplate).filter(LineTemplate.company_id == company_id)
        if is_active is not None:
            query = query.filter(LineTemplate.is_active == is_active)
        if category is not None:
            query = query.filter(LineTemplate.category == category)
        return query.order_by(LineTemplate.name.asc()).all()

    def get_by_id(self, template_id: UUID, company_id: UUID | None = None) -> LineTemplate | None:
        query = self.db.query(LineTemplate).filter(LineTemplate.id == template_id)
        if company_id is not None:
            query = query.filter(LineTemplate.company_id == company_id)
        return query.first()

    def create(self, data: LineTemplateCreate, company_id: UUID) -> LineTemplate:
        template = LineTemplate(
            **data.model_dump(),
            company_id=company_id,
            variables=extract_placeholders(data.content),
        )
        self.db.add(template)
        self.db.commit()
        self.db.refresh(template)
        return template

    def update(
        self, template_id: UUID, data: LineTemplateUpdate, company_id: UUID
    ) -> LineTemplate | None:
        template = self.get_by_id(template_id, company_id)
        if not template:
            return None
        updates = data.model_dump(exclude_unset=True)
        for key, value in updates.items():
            setattr(template, key, value)
        if updates.get("content"):
            template.variables = extract_placeholders(updates["content"])  # type: ignore[assignment]
        self.db.commit()
        self.db.refresh(template)
        return template

    def delete(self, template_id: UUID, company_id: UUID) -> bool:
        template = self.get_by_id(template_id, company_id)
        if not template:
            return False
        self.db.delete(template)
        self.db.commit()
        return True

    def increment_usage(self, template: LineTemplate) -> None:
        """Bump the usage counter in the database. Does not commit."""
        self.db.query(LineTemplate).filter(LineTemplate.id == template.id).update(
            {"usage_count": LineTemplate.usage_count + 1}, synchronize_session=False
        )
