#!/usr/bin/env python3
"""
Script to create a tenant with opening hours and an API key
Usage: python -m booking_api.scripts.create_business "Salon Anna" [owner_user_id]
"""
import sys
import uuid
from sqlalchemy.orm import Session

from booking_api.config.database import SessionLocal
from booking_api.models.business import Business, BusinessSettings, BusinessStatus
from booking_api.schemas.opening_hours import OpeningHours
from booking_api.services.api_key.api_key_service import APIKeyService


def create_business(name: str, owner_user_id: str = None):
    """Create a tenant with default opening hours and one integration key"""
    db: Session = SessionLocal()

    try:
        business = Business(
            name=name,
            owner_user_id=uuid.UUID(owner_user_id) if owner_user_id else None,
            status=BusinessStatus.ACTIVE,
        )
        db.add(business)
        db.flush()

        opening_hours = OpeningHours()
        db.add(BusinessSettings(
            business_id=business.id,
            opening_hours=opening_hours.model_dump(),
        ))
        db.commit()
        db.refresh(business)

        _, raw_key = APIKeyService(db).generate_key(business.id, name="Voice Agent / n8n")

        print("\n" + "=" * 60)
        print("BUSINESS CREATED SUCCESSFULLY!")
        print("=" * 60)
        print(f"\nBusiness ID: {business.id}")
        print(f"Name: {business.name}")
        print(f"\nOpening Hours:")
        for day_name, hours in opening_hours.model_dump().items():
            if hours["closed"]:
                print(f"  {day_name.title()}: CLOSED")
            else:
                print(f"  {day_name.title()}: {hours['open']} - {hours['close']}")

        print(f"\nAPI key (shown once, store it now): {raw_key}")
        print()

        return str(business.id)

    except Exception as e:
        db.rollback()
        print(f"\n❌ Error creating business: {e}")
        import traceback
        traceback.print_exc()
        sys.exit(1)
    finally:
        db.close()


if __name__ == "__main__":
    if len(sys.argv) < 2:
        print(__doc__)
        sys.exit(1)
    create_business(sys.argv[1], sys.argv[2] if len(sys.argv) > 2 else None)
