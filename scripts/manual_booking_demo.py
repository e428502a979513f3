# scripts/manual_booking_demo.py
import os
from datetime import datetime, timedelta

from booking.db.session import SessionLocal, engine
from booking.models import Base, Event, Integration, User
from booking.models.event import EventLocationType
from booking.models.integration import (
    IntegrationAppType,
    IntegrationCategory,
    IntegrationProvider,
)
from booking.services.booking_service import create_meet_booking_for_guest
from booking.services.cancellation_service import cancel_meeting


def main() -> None:
    # Real Google tokens for your own account, e.g. from the OAuth playground
    access_token = os.environ["GOOGLE_ACCESS_TOKEN"]
    refresh_token = os.environ.get("GOOGLE_REFRESH_TOKEN")
    guest_email = os.environ.get("DEMO_GUEST_EMAIL", "<INSERT-GUEST-EMAIL>")

    Base.metadata.create_all(bind=engine)

    db = SessionLocal()
    try:
        # 1) Create (or reuse) the organizer, event and integration
        user = db.query(User).filter(User.username == "manual-demo").first()
        if not user:
            user = User(
                name="Manual Demo",
                username="manual-demo",
                email=os.environ.get("DEMO_ORGANIZER_EMAIL", "<INSERT-YOUR-EMAIL>"),
                timezone="America/Bogota",
            )
            db.add(user)
            db.commit()
            db.refresh(user)

        event = db.query(Event).filter_by(user_id=user.id, slug="manual-demo").first()
        if not event:
            event = Event(
                user_id=user.id,
                title="Manual demo",
                slug="manual-demo",
                duration=30,
                location_type=EventLocationType.GOOGLE_MEET_AND_CALENDAR.value,
            )
            db.add(event)

        integration = (
            db.query(Integration)
            .filter_by(user_id=user.id, app_type=IntegrationAppType.GOOGLE_MEET_AND_CALENDAR.value)
            .first()
        )
        if not integration:
            integration = Integration(
                user_id=user.id,
                provider=IntegrationProvider.GOOGLE.value,
                category=IntegrationCategory.CALENDAR_AND_VIDEO_CONFERENCING.value,
                app_type=IntegrationAppType.GOOGLE_MEET_AND_CALENDAR.value,
                access_token=access_token,
            )
            db.add(integration)
        integration.access_token = access_token
        integration.refresh_token = refresh_token
        integration.expiry_date = None
        db.commit()
        db.refresh(event)

        # 2) Book tomorrow 10:00 Bogota time
        start = (datetime.now() + timedelta(days=1)).replace(hour=10, minute=0, second=0, microsecond=0)
        result = create_meet_booking_for_guest(
            db,
            event_id=event.id,
            guest_name="Manual Guest",
            guest_email=guest_email,
            additional_info="Created by scripts/manual_booking_demo.py",
            start_time=start,
            end_time=start + timedelta(minutes=event.duration),
            timezone="America/Bogota",
        )
        print(f"Created meeting id={result.meeting.id} meet_link={result.meet_link}")
        print(f"Remote calendar event id={result.meeting.calendar_event_id}")

        # 3) Optionally cancel again
        if os.environ.get("DEMO_CANCEL") == "1":
            print(cancel_meeting(db, result.meeting.id))

    finally:
        db.close()


if __name__ == "__main__":
    main()
