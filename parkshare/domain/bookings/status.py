"""Display status of a booking, derived on every read.

The persisted ``status`` column drives filtering and state changes; what a
user sees is computed here from payment state and the clock only.
"""

from datetime import datetime

UPCOMING = "upcoming"
ACTIVE = "active"
EXPIRED = "expired"
CANCELLED = "cancelled"


def derive_status(booking, now: datetime) -> str:
    """First matching rule wins:

    1. payment not completed -> cancelled
    2. before start -> upcoming
    3. start <= now <= end -> active
    4. otherwise -> expired
    """
    if booking.payment_status != "completed":
        return CANCELLED

    if now < booking.start_time:
        return UPCOMING

    if booking.start_time <= now <= booking.end_time:
        return ACTIVE

    return EXPIRED
