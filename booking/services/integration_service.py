# booking/services/integration_service.py
import logging
from typing import Optional

from sqlalchemy.orm import Session

from booking.errors import IntegrationNotFound
from booking.models.event import EventLocationType
from booking.models.integration import Integration, IntegrationAppType
from booking.services.token_service import AccessToken

logger = logging.getLogger(__name__)

# Which integration an event's location type needs. Location types missing
# here (in person, phone) need none.
LOCATION_REQUIRED_APP_TYPE = {
    EventLocationType.GOOGLE_MEET_AND_CALENDAR.value: IntegrationAppType.GOOGLE_MEET_AND_CALENDAR,
    EventLocationType.ZOOM_MEETING.value: IntegrationAppType.ZOOM_MEETING,
}


def required_app_type_for_location(location_type: str) -> Optional[IntegrationAppType]:
    return LOCATION_REQUIRED_APP_TYPE.get(location_type)


def find_integration(
    db: Session,
    *,
    user_id: int,
    app_type: str,
) -> Optional[Integration]:
    """
    Connected integration of `app_type` owned by `user_id`, or None.
    Always scoped to the user so one organizer's tokens never serve another.
    """
    app_type_value = app_type.value if isinstance(app_type, IntegrationAppType) else app_type
    return (
        db.query(Integration)
        .filter(
            Integration.user_id == user_id,
            Integration.app_type == app_type_value,
            Integration.is_connected.is_(True),
        )
        .first()
    )


def resolve_integration(
    db: Session,
    *,
    user_id: int,
    app_type: str,
) -> Integration:
    integration = find_integration(db, user_id=user_id, app_type=app_type)
    if integration is None:
        raise IntegrationNotFound(f"No {getattr(app_type, 'value', app_type)} integration for user {user_id}")
    return integration


def store_refreshed_token(db: Session, integration: Integration, token: Optional[AccessToken]) -> None:
    """
    Write a refreshed token back onto the integration. No-op when the token
    was still valid. Commits immediately, independent of the caller's outcome.
    """
    if token is None or not token.refreshed:
        return

    integration.access_token = token.token
    integration.expiry_date = token.expiry_date
    db.add(integration)
    db.commit()
    logger.info(f"Stored refreshed token for integration {integration.id}")
