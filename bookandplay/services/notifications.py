from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from bookandplay.core.logging_config import get_logger
from bookandplay.models.notification import Notification
from bookandplay.schemas.notification import NotificationPayload
from bookandplay.utils.timeutils import format_booking_date

logger = get_logger()


def booking_pending(booking, venue, player) -> NotificationPayload:
    return NotificationPayload(
        recipient_id=venue.owner_id,
        title="New Booking Request",
        message=(
            f"{player.name} requested a booking at {venue.name} "
            f"for {format_booking_date(booking.booking_date)}"
        ),
        data={"booking_id": booking.id, "venue_id": venue.id, "player_id": player.id},
    )


def booking_confirmed(booking, venue) -> NotificationPayload:
    return NotificationPayload(
        recipient_id=booking.player_id,
        title="Booking Confirmed",
        message=(
            f"Your booking at {venue.name} for "
            f"{format_booking_date(booking.booking_date)} has been confirmed"
        ),
        data={"booking_id": booking.id, "venue_id": venue.id},
    )


def booking_cancelled(booking, venue, reason: str | None = None) -> NotificationPayload:
    message = (
        f"Your booking at {venue.name} for "
        f"{format_booking_date(booking.booking_date)} has been cancelled"
    )
    if reason:
        message += f". Reason: {reason}"

    return NotificationPayload(
        recipient_id=booking.player_id,
        title="Booking Cancelled",
        message=message,
        data={"booking_id": booking.id, "venue_id": venue.id},
    )


def booking_cancelled_by_player(booking, venue, player) -> NotificationPayload:
    return NotificationPayload(
        recipient_id=venue.owner_id,
        title="Booking Cancelled",
        message=(
            f"{player.name} cancelled their booking at {venue.name} "
            f"for {format_booking_date(booking.booking_date)}"
        ),
        data={"booking_id": booking.id, "venue_id": venue.id, "player_id": player.id},
    )


def dispatch(db: Session, payload: NotificationPayload) -> Notification | None:
    """
    Store the payload in the outbox. Runs after the booking change has been
    committed, so a failure here is logged and never undoes the booking.
    """
    try:
        row = Notification(
            user_id=payload.recipient_id,
            title=payload.title,
            message=payload.message,
            type=payload.type,
            data=payload.data,
        )
        db.add(row)
        db.commit()
        return row
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Notification to user {payload.recipient_id} not recorded -> {e}")
        return None
