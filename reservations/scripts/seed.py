from datetime import time, datetime, timedelta
from sqlmodel import Session, select

from reservations.database import create_db_and_tables, engine
from reservations.models.business import Business, Offering
from reservations.models.schedule import DayOfWeek, ScheduleSettingsUpdate, WorkingDayUpdate
from reservations.models.time_off import TimeOffCreate
from reservations.models.user import User
from reservations.services.schedule import create_default_schedule, update_schedule
from reservations.services.time_off import add_time_off


OWNER_EMAIL = "owner@example.com"
CUSTOMER_EMAIL = "customer@example.com"


def get_or_create_user(session: Session, name: str, email: str) -> User:
    user = session.exec(select(User).where(User.email == email)).first()
    if not user:
        user = User(name=name, email=email)
        session.add(user)
        session.commit()
        session.refresh(user)
    return user


def main():
    create_db_and_tables()

    with Session(engine) as session:
        # 1) users
        owner = get_or_create_user(session, "Shop Owner", OWNER_EMAIL)
        get_or_create_user(session, "First Customer", CUSTOMER_EMAIL)

        # 2) business + default schedule
        business = session.exec(select(Business).where(Business.owner_id == owner.id)).first()
        if business:
            print(f"Business {business.id} already seeded, nothing to do")
            return

        business = Business(name="Demo Studio", owner_id=owner.id)
        session.add(business)
        session.commit()
        session.refresh(business)
        create_default_schedule(session, business.id)

        # 3) Mon-Sat 09-18 with lunch 12-13, sunday closed
        days = []
        for day in DayOfWeek:
            if day == DayOfWeek.SUNDAY:
                days.append(WorkingDayUpdate(day_of_week=day, is_day_off=True))
            else:
                days.append(
                    WorkingDayUpdate(
                        day_of_week=day,
                        start_time=time(9, 0),
                        end_time=time(18, 0),
                        break_start_time=time(12, 0),
                        break_end_time=time(13, 0),
                    )
                )
        update_schedule(
            session,
            business.id,
            owner.id,
            ScheduleSettingsUpdate(
                min_advance_booking_hours=2,
                max_advance_booking_days=30,
                default_slot_duration_minutes=30,
                auto_confirm_appointments=True,
                working_days=days,
            ),
        )

        # 4) offerings
        session.add_all(
            [
                Offering(business_id=business.id, name="Haircut", duration_minutes=30, price=40.0),
                Offering(business_id=business.id, name="Beard", duration_minutes=20, price=30.0),
                Offering(business_id=business.id, name="Haircut + Beard", duration_minutes=50, price=65.0),
            ]
        )
        session.commit()

        # 5) sample time off: tomorrow 15:00-16:00
        tomorrow = (datetime.now() + timedelta(days=1)).date()
        add_time_off(
            session,
            business.id,
            owner.id,
            TimeOffCreate(
                start_time=datetime.combine(tomorrow, time(15, 0)),
                end_time=datetime.combine(tomorrow, time(16, 0)),
                reason="Sample",
            ),
        )

        print("Seed finished")
        print(f"Owner: {owner.id} ({owner.email})")
        print(f"Business: {business.id} ({business.name})")
        print("Hours: Mon-Sat 09-18, lunch 12-13; sunday closed")


if __name__ == "__main__":
    main()
