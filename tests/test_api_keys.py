from datetime import datetime, timedelta, timezone

import pytest

from booking_api.core.exceptions import AuthError, InactiveAccountError
from booking_api.models import APIKey, BusinessStatus
from booking_api.services.api_key.api_key_service import APIKeyService


def test_generated_key_is_stored_hashed(db, business):
    service = APIKeyService(db)
    api_key, raw_key = service.generate_key(business.id, "n8n Workflow")

    assert raw_key.startswith("rsv_live_")
    assert api_key.key_prefix == raw_key[:12]
    assert api_key.key_hash != raw_key
    assert db.query(APIKey).filter(APIKey.key_hash == raw_key).first() is None


def test_authenticate_tracks_usage(db, business, api_key):
    service = APIKeyService(db)

    assert service.authenticate(api_key).id == business.id
    assert service.authenticate(f"  {api_key} ").id == business.id

    stored = db.query(APIKey).one()
    assert stored.usage_count == 2
    assert stored.last_used_at is not None


def test_revoked_key_is_rejected(db, business):
    service = APIKeyService(db)
    api_key, raw_key = service.generate_key(business.id, "Voice Agent")

    assert service.revoke_key(api_key.id, business.id)
    with pytest.raises(AuthError):
        service.authenticate(raw_key)


def test_expired_key_is_rejected(db, business):
    service = APIKeyService(db)
    _, raw_key = service.generate_key(
        business.id, "Voice Agent", expires_at=datetime.now(timezone.utc) - timedelta(minutes=1)
    )

    with pytest.raises(AuthError):
        service.authenticate(raw_key)


def test_inactive_business(db, business, api_key):
    business.status = BusinessStatus.INACTIVE
    db.commit()

    with pytest.raises(InactiveAccountError) as exc:
        APIKeyService(db).authenticate(api_key)
    assert exc.value.status_code == 403


@pytest.mark.parametrize("raw", [None, "", "   "])
def test_missing_key(db, raw):
    with pytest.raises(AuthError) as exc:
        APIKeyService(db).authenticate(raw)
    assert exc.value.status_code == 401
