"""LINE settings, message templates and message log endpoints."""

from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from acctbill.core.auth import get_current_company
from acctbill.core.database import get_db
from acctbill.models.line_message import LineMessageStatus
from acctbill.models.line_settings import LineSettings
from acctbill.models.line_template import LineTemplate
from acctbill.repositories.line_message_repository import LineMessageRepository
from acctbill.repositories.line_settings_repository import LineSettingsRepository
from acctbill.repositories.line_template_repository import LineTemplateRepository
from acctbill.schemas.line_message import LineMessageResponse
from acctbill.schemas.line_settings import LineSettingsResponse, LineSettingsUpdate
from acctbill.schemas.line_template import (
    LineTemplateCreate,
    LineTemplateResponse,
    LineTemplateUpdate,
)

router = APIRouter()


def _settings_response(company_id: UUID, line_settings: LineSettings | None) -> LineSettingsResponse:
    if line_settings is None:
        return LineSettingsResponse(
            company_id=company_id,
            has_access_token=False,
            has_channel_secret=False,
            is_active=False,
        )
    return LineSettingsResponse(
        company_id=company_id,
        has_access_token=bool(line_settings.channel_access_token),
        has_channel_secret=bool(line_settings.channel_secret),
        is_active=bool(line_settings.is_active),
        updated_at=line_settings.updated_at,  # type: ignore[arg-type]
    )


@router.get("/settings", response_model=LineSettingsResponse, summary="Get LINE settings")
async def get_line_settings(
    db: Session = Depends(get_db),
    company_id: UUID = Depends(get_current_company),
) -> LineSettingsResponse:
    """Credentials are never returned, only whether they are set."""
    line_settings = LineSettingsRepository(db).get_by_company(company_id)
    return _settings_response(company_id, line_settings)


@router.put("/settings", response_model=LineSettingsResponse, summary="Update LINE settings")
async def update_line_settings(
    data: LineSettingsUpdate,
    db: Session = Depends(get_db),
    company_id: UUID = Depends(get_current_company),
) -> LineSettingsResponse:
    line_settings = LineSettingsRepository(db).upsert(company_id, data)
    return _settings_response(company_id, line_settings)


@router.get(
    "/messages",
    response_model=list[LineMessageResponse],
    summary="List LINE messages",
)
async def list_line_messages(
    skip: int = Query(default=0, ge=0),
    limit: int = Query(default=50, ge=1, le=200),
    status: LineMessageStatus | None = None,
    billing_request_id: UUID | None = None,
    order_by: str | None = Query(default=None),
    db: Session = Depends(get_db),
    company_id: UUID = Depends(get_current_company),
) -> list[LineMessageResponse]:
    """List sent and failed LINE pushes."""
    repo = LineMessageRepository(db)
    messages = repo.get_all(
        company_id,
        skip=skip,
        limit=limit,
        status=status.value if status else None,
        billing_request_id=billing_request_id,
        order_by=order_by,
    )
    return [LineMessageResponse.model_validate(m) for m in messages]


@router.get(
    "/templates",
    response_model=list[LineTemplateResponse],
    summary="List LINE templates",
)
async def list_line_templates(
    is_active: bool | None = None,
    category: str | None = None,
    db: Session = Depends(get_db),
    company_id: UUID = Depends(get_current_company),
) -> list[LineTemplate]:
    return LineTemplateRepository(db).get_all(company_id, is_active=is_active, category=category)


@router.post(
    "/templates",
    response_model=LineTemplateResponse,
    status_code=201,
    summary="Create LINE template",
)
async def create_line_template(
    data: LineTemplateCreate,
    db: Session = Depends(get_db),
    company_id: UUID = Depends(get_current_company),
) -> LineTemplate:
    """Placeholders in the content are recorded in ``variables``."""
    return LineTemplateRepository(db).create(data, company_id)


@router.get(
    "/templates/{template_id}",
    response_model=LineTemplateResponse,
    summary="Get LINE template",
    responses={404: {"description": "Template not found"}},
)
async def get_line_template(
    template_id: UUID,
    db: Session = Depends(get_db),
    company_id: UUID = Depends(get_current_company),
) -> LineTemplate:
    template = LineTemplateRepository(db).get_by_id(template_id, company_id)
    if not template:
        raise HTTPException(status_code=404, detail="Template not found")
    return template


@router.put(
    "/templates/{template_id}",
    response_model=LineTemplateResponse,
    summary="Update LINE template",
    responses={404: {"description": "Template not found"}},
)
async def update_line_template(
    template_id: UUID,
    data: LineTemplateUpdate,
    db: Session = Depends(get_db),
    company_id: UUID = Depends(get_current_company),
) -> LineTemplate:
    template = LineTemplateRepository(db).update(template_id, data, company_id)
    if not template:
        raise HTTPException(status_code=404, detail="Template not found")
    return template


@router.delete(
    "/templates/{template_id}",
    status_code=204,
    summary="Delete LINE template",
    responses={404: {"description": "Template not found"}},
)
async def delete_line_template(
    template_id: UUID,
    db: Session = Depends(get_db),
    company_id: UUID = Depends(get_current_company),
) -> None:
    if not LineTemplateRepository(db).delete(template_id, company_id):
        raise HTTPException(status_code=404, detail="Template not found")
