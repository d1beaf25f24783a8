import hmac
from uuid import UUID

from fastapi import HTTPException, Request

from acctbill.core.config import settings
from acctbill.models.shared import DEFAULT_COMPANY_ID


def get_current_company(request: Request) -> UUID:
    """Resolve the company (tenant) for the request.

    Session handling lives in front of this service; it forwards the selected
    company in the ``X-Company-Id`` header. Without the header the default
    company is used.
    """
    company_id_header = request.headers.get("X-Company-Id")
    if not company_id_header:
        return DEFAULT_COMPANY_ID
    try:
        return UUID(company_id_header)
    except ValueError:
        raise HTTPException(status_code=400, detail="Invalid X-Company-Id header") from None


def verify_cron_secret(request: Request) -> None:
    """Guard cron trigger endpoints with ``Authorization: Bearer <CRON_SECRET>``."""
    if not settings.CRON_SECRET:
        return

    auth_header = request.headers.get("Authorization")
    if not auth_header or not auth_header.startswith("Bearer "):
        raise HTTPException(status_code=401, detail="Invalid authorization header format")

    if not hmac.compare_digest(auth_header[7:], settings.CRON_SECRET):
        raise HTTPException(status_code=401, detail="Invalid cron secret")
