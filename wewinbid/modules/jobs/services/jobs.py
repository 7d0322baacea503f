"""
Periodic jobs.

Each job opens its own session so it can run from a cron request, the
in-process scheduler thread or a shell.
"""
import logging
import threading
from typing import Callable, Dict, Optional

from wewinbid.config import settings
from wewinbid.db.database import SessionLocal
from wewinbid.modules.alerts.db.schema import AlertFrequencyEnum
from wewinbid.modules.alerts.services.alert_service import AlertService
from wewinbid.modules.calendar.services.calendar_service import CalendarService
from wewinbid.modules.documents.services.document_service import DocumentService
from wewinbid.modules.notifications.services.deadline_service import send_deadline_notifications
from wewinbid.modules.signatures.services.signature_service import SignatureService

logger = logging.getLogger(__name__)

_stop_event = threading.Event()
_thread: Optional[threading.Thread] = None


def _run(name: str, job: Callable):
    db = SessionLocal()
    try:
        result = job(db)
        logger.info(f"Job '{name}' finished: {result}")
        return result
    except Exception:
        db.rollback()
        logger.error(f"Job '{name}' failed", exc_info=True)
        raise
    finally:
        db.close()


def run_deadline_notifications() -> dict:
    return _run("deadline-notifications", send_deadline_notifications)


def run_alert_digests(frequency: AlertFrequencyEnum) -> dict:
    return _run(f"alert-digests-{frequency.value}", lambda db: AlertService(db).send_digests(frequency))


def run_calendar_reminders() -> dict:
    return _run("calendar-reminders", lambda db: {"sent": CalendarService(db).dispatch_due_reminders()})


def run_document_expiry() -> dict:
    return _run("document-expiry", lambda db: {"sent": DocumentService(db).notify_expiring_documents()})


def run_signature_expiry() -> dict:
    return _run("signature-expiry", lambda db: {"expired": SignatureService(db).expire_overdue()})


def run_all_jobs() -> Dict[str, dict]:
    """Run every periodic job once; a failing job does not stop the others."""
    jobs = {
        "deadline_notifications": run_deadline_notifications,
        "alert_digests_daily": lambda: run_alert_digests(AlertFrequencyEnum.daily),
        "alert_digests_weekly": lambda: run_alert_digests(AlertFrequencyEnum.weekly),
        "calendar_reminders": run_calendar_reminders,
        "document_expiry": run_document_expiry,
        "signature_expiry": run_signature_expiry,
    }
    results = {}
    for name, job in jobs.items():
        try:
            results[name] = job()
        except Exception as e:
            results[name] = {"error": str(e)}
    return results


def _loop(interval_seconds: float) -> None:
    while not _stop_event.wait(interval_seconds):
        run_all_jobs()


def start_job_thread(interval_minutes: Optional[float] = None) -> Optional[threading.Thread]:
    global _thread
    interval_minutes = settings.JOBS_INTERVAL_MINUTES if interval_minutes is None else interval_minutes
    if interval_minutes <= 0 or (_thread is not None and _thread.is_alive()):
        return _thread
    _stop_event.clear()
    _thread = threading.Thread(target=_loop, args=(interval_minutes * 60,), name="wewinbid-jobs", daemon=True)
    _thread.start()
    logger.info(f"Background jobs scheduled every {interval_minutes} minutes")
    return _thread


def stop_job_thread(timeout: float = 30.0) -> None:
    global _thread
    _stop_event.set()
    if _thread is not None:
        # Waits for an in-flight run_all_jobs
        _thread.join(timeout=timeout)
        if _thread.is_alive():
            logger.warning(f"Background jobs thread still running after {timeout}s")
        _thread = None
