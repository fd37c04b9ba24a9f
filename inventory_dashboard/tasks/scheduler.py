# inventory_dashboard/tasks/scheduler.py
from __future__ import annotations

import atexit
import os

from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.interval import IntervalTrigger


def start_scheduler(app):
    """
    Starts the overdue reminder job when SCHEDULER_ENABLED is set.
    - Skips the debug reloader's secondary process.
    - A failure to start is logged; the app still comes up.
    """
    if not app.config.get("SCHEDULER_ENABLED"):
        app.logger.info("[scheduler] Disabled (SCHEDULER_ENABLED not set).")
        return None

    # werkzeug reloader runs two processes; WERKZEUG_RUN_MAIN marks the real one
    if app.debug and os.environ.get("WERKZEUG_RUN_MAIN") != "true":
        app.logger.info("[scheduler] Debug reloader secondary process: scheduler skipped.")
        return None

    from inventory_dashboard.tasks.overdue_check import run_overdue_check_job

    minutes = app.config.get("OVERDUE_CHECK_MINUTES", 60)

    try:
        scheduler = BackgroundScheduler(timezone=app.config.get("APP_TIMEZONE", "UTC"))
        scheduler.add_job(
            func=run_overdue_check_job,
            args=[app],
            trigger=IntervalTrigger(minutes=minutes),
            id="overdue_check_job",
            replace_existing=True,
            max_instances=1,
            coalesce=True,
            misfire_grace_time=120,
        )
        scheduler.start()
    except Exception as e:
        app.logger.warning(f"[scheduler] Scheduler could not be started: {e}")
        return None

    app.logger.info(f"[scheduler] Overdue check job started (every {minutes} minutes).")
    app.extensions["apscheduler"] = scheduler
    atexit.register(lambda: scheduler.shutdown(wait=False) if scheduler.running else None)
    return scheduler
