"""Fire-and-forget delivery of clock notifications."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING

from pomoline.core.errors import NotificationFailed
from pomoline.notify.notifier import Notifier

if TYPE_CHECKING:
    from pomoline.clock.state import ClockNotification

logger = logging.getLogger(__name__)


def dispatch(
    notifier: Notifier,
    notification: ClockNotification,
    icon: str | Path | None = None,
) -> bool:
    """Deliver a notification, never raising.

    Returns True when the notifier accepted it. Failures are logged and
    dropped so a missing notification daemon cannot stop the clock.
    """
    try:
        notifier.notify(notification.title, notification.body, icon)
        return True
    except NotificationFailed as e:
        logger.warning(f"Notification not shown: {e}")
    except Exception as e:
        logger.error(f"Error in notifier: {e}")
    return False
