"""Desktop notifications for upcoming prayers."""

import datetime
import logging
import threading

from plyer import notification

from miqat.next_prayer import NextPrayer, seconds_until

logger = logging.getLogger(__name__)

APP_NAME = "Miqat"
APP_ICON = ""  # Path to icon file; empty = default

REMINDER_MINUTES = (10, 5)


def _send_notification(title: str, message: str, timeout: int = 10) -> None:
    """Send a desktop notification via plyer (cross-platform)."""
    kwargs = dict(
        app_name=APP_NAME,
        title=title,
        message=message,
        timeout=timeout,
    )
    if APP_ICON:
        kwargs["app_icon"] = APP_ICON
    try:
        notification.notify(**kwargs)
    except Exception as exc:  # plyer raises whatever the platform backend raises
        logger.warning("desktop notification failed: %s", exc)


def notify_reminder(prayer_name: str, minutes: int, callback=None) -> None:
    """
    Send a desktop notification for a prayer reminder N minutes before prayer time.
    Optionally calls callback(title, message).
    """
    title = f"{prayer_name} in {minutes} minutes"
    message = f"{prayer_name} prayer starts in {minutes} minutes. Prepare for prayer."
    _send_notification(title, message, timeout=15)
    if callback:
        callback(title, message)


def notify_prayer_time(prayer_name: str, callback=None) -> None:
    """
    Send a desktop notification when prayer time arrives.
    Optionally calls callback(title, message).
    """
    title = f"{prayer_name}: Time to Pray!"
    message = f"It is now time for {prayer_name} prayer. Allahu Akbar!"
    _send_notification(title, message, timeout=30)
    if callback:
        callback(title, message)


def _start_timer(delay: int, func, args) -> threading.Timer:
    t = threading.Timer(delay, func, args=args)
    t.daemon = True
    t.start()
    return t


def schedule_reminders(
    upcoming: NextPrayer,
    now: datetime.datetime,
    gui_callback=None,
) -> list:
    """
    Schedule reminder notifications 10 and 5 minutes before `upcoming`,
    and an alert exactly at prayer time.

    Returns list of Timer objects so they can be cancelled if needed.
    """
    seconds_left = seconds_until(upcoming.time, now)
    timers = []

    for remind_minutes in REMINDER_MINUTES:
        delay = seconds_left - remind_minutes * 60
        if delay > 0:
            timers.append(
                _start_timer(delay, notify_reminder, (upcoming.name, remind_minutes, gui_callback))
            )

    if seconds_left > 0:
        timers.append(_start_timer(seconds_left, notify_prayer_time, (upcoming.name, gui_callback)))

    logger.debug("armed %d reminder(s) for %s at %s", len(timers), upcoming.name, upcoming.time)
    return timers
