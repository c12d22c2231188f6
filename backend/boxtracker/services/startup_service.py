from datetime import datetime, timedelta, timezone
from typing import Callable

from apscheduler.schedulers.base import BaseScheduler

from boxtracker.repositories.base import InventoryRepository
from boxtracker.utils.log_setup import get_logger

log = get_logger("startup")

STARTUP_SCAN_JOB_ID = "startup_scan"


def run_startup_scan(open_repo: Callable[[], InventoryRepository]) -> bool:
    """
    Read-only look at the store once the server is up. Logs what it finds;
    any failure is logged and swallowed so it can never take the process down.
    Returns True when the scan completed.
    """
    try:
        repo = open_repo()
        try:
            boxes = repo.count_boxes()
            owners = repo.count_owners()
        finally:
            repo.close()
        log.info("startup scan: %d boxes, %d owners on record", boxes, owners)
        return True
    except Exception:
        log.exception("startup scan failed")
        return False


def schedule_startup_scan(
    scheduler: BaseScheduler,
    open_repo: Callable[[], InventoryRepository],
    delay_seconds: int,
):
    run_at = datetime.now(timezone.utc) + timedelta(seconds=delay_seconds)
    return scheduler.add_job(
        run_startup_scan,
        "date",
        run_date=run_at,
        args=[open_repo],
        id=STARTUP_SCAN_JOB_ID,
        replace_existing=True,
    )
