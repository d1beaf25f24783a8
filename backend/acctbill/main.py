from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from starlette.responses import Response

from acctbill.core.config import settings
from acctbill.routers import (
    billing_requests,
    cron,
    customers,
    line,
    payment_accounts,
    recurring_billings,
)

OPENAPI_TAGS = [
    {"name": "Customers", "description": "Create, read, update, and delete customers."},
    {
        "name": "Recurring Billings",
        "description": "Manage recurring billing definitions and their schedules.",
    },
    {
        "name": "Billing Requests",
        "description": "Manage billing requests, LINE notices, and payment confirmation.",
    },
    {"name": "Payment Accounts", "description": "Manage receiving bank accounts."},
    {"name": "LINE", "description": "LINE Messaging API settings and message log."},
    {"name": "Cron", "description": "Scheduled job triggers."},
]

app = FastAPI(
    title=settings.APP_NAME,
    version=settings.version,
    description=(
        "Accounting and billing API for small businesses. "
        "Manage customers, recurring billings, billing requests, payment accounts, "
        "and LINE notifications."
    ),
    openapi_tags=OPENAPI_TAGS,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=[
        o.strip() for o in settings.CORS_ORIGINS.split(",") if o.strip()
    ],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["X-Total-Count"],
)


@app.middleware("http")
async def options_handler(request: Request, call_next):  # type: ignore[no-untyped-def]
    if request.method == "OPTIONS":
        origin = request.headers.get("origin", "*")
        return Response(
            status_code=200,
            headers={
                "Access-Control-Allow-Origin": origin,
                "Access-Control-Allow-Methods": "*",
                "Access-Control-Allow-Headers": "*",
                "Access-Control-Allow-Credentials": "true",
                "Access-Control-Max-Age": "86400",
            },
        )
    return await call_next(request)


app.include_router(customers.router, prefix="/v1/customers", tags=["Customers"])
app.include_router(
    recurring_billings.router,
    prefix="/v1/recurring_billings",
    tags=["Recurring Billings"],
)
app.include_router(
    billing_requests.router,
    prefix="/v1/billing_requests",
    tags=["Billing Requests"],
)
app.include_router(
    payment_accounts.router,
    prefix="/v1/payment_accounts",
    tags=["Payment Accounts"],
)
app.include_router(line.router, prefix="/v1/line", tags=["LINE"])
app.include_router(cron.router, prefix="/v1/cron", tags=["Cron"])


@app.get("/")
async def root() -> dict[str, str]:
    return {
        "app": settings.APP_NAME,
        "version": settings.version,
        "domain": settings.APP_DOMAIN,
        "status": "running",
    }
