import secrets

from fastapi import APIRouter, Depends, Header, Query
from typing import Optional

from wewinbid.config import settings
from wewinbid.core.errors import AuthenticationError, ServiceUnavailableError
from wewinbid.modules.alerts.db.schema import AlertFrequencyEnum
from wewinbid.modules.jobs.services import jobs

router = APIRouter(prefix="/cron", tags=["Cron"])


def verify_cron_secret(authorization: Optional[str] = Header(None)) -> None:
    if not settings.CRON_SECRET:
        raise ServiceUnavailableError("Cron jobs are not configured")
    expected = f"Bearer {settings.CRON_SECRET}"
    if not authorization or not secrets.compare_digest(authorization.encode(), expected.encode()):
        raise AuthenticationError("Invalid cron secret")


@router.post("/deadline-notifications", dependencies=[Depends(verify_cron_secret)])
def deadline_notifications():
    return jobs.run_deadline_notifications()


@router.post("/alert-digests", dependencies=[Depends(verify_cron_secret)])
def alert_digests(frequency: AlertFrequencyEnum = Query(AlertFrequencyEnum.daily)):
    if frequency == AlertFrequencyEnum.instant:
        return {"sent": 0, "total": 0}
    return jobs.run_alert_digests(frequency)


@router.post("/calendar-reminders", dependencies=[Depends(verify_cron_secret)])
def calendar_reminders():
    return jobs.run_calendar_reminders()


@router.post("/document-expiry", dependencies=[Depends(verify_cron_secret)])
def document_expiry():
    return jobs.run_document_expiry()


@router.post("/signature-expiry", dependencies=[Depends(verify_cron_secret)])
def signature_expiry():
    return jobs.run_signature_expiry()
