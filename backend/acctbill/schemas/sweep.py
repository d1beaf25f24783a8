from pydantic import BaseModel


class SweepSummary(BaseModel):
    processed: int = 0
    created: int = 0
    notified: int = 0
    notification_failed: int = 0
    skipped: int = 0
    failed: int = 0
    deferred: int = 0
