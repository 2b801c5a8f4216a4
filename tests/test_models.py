"""Tests for the subscription persistence hooks (renewal derivation, expiry)."""

from datetime import timedelta

import pytest

from app.domain.clock import as_utc, utc_now
from app.domain.models import Subscription, derive_renewal_date
from app.repositories.subscription_repository import SubscriptionRepository
from app.repositories.user_repository import UserRepository
from app.extensions import db


def _create_user():
    repo = UserRepository()
    user = repo.create(name="Ada", email="ada@example.com", password_hash="x")
    repo.commit()
    return user


def _create_subscription(user, **overrides):
    fields = {
        "name": "Spotify",
        "price": 9.99,
        "currency": "USD",
        "frequency": "monthly",
        "category": "entertainment",
        "payment_method": "Visa",
    }
    fields.update(overrides)
    repo = SubscriptionRepository()
    subscription = repo.create(user_id=user.id, **fields)
    repo.commit()
    return subscription


class TestRenewalDerivation:

    @pytest.mark.parametrize("frequency, days", [
        ("daily", 1), ("weekly", 7), ("monthly", 30), ("yearly", 365),
    ])
    def test_derive_renewal_date(self, frequency, days):
        start = utc_now().replace(microsecond=0)
        assert derive_renewal_date(start, frequency) == start + timedelta(days=days)

    def test_missing_renewal_is_derived_on_save(self, app):
        start = (utc_now() - timedelta(days=1)).replace(microsecond=0)
        subscription = _create_subscription(_create_user(), start_date=start)

        assert as_utc(subscription.renewal_date) == start + timedelta(days=30)
        assert subscription.status == "active"

    def test_explicit_renewal_is_kept(self, app):
        start = (utc_now() - timedelta(days=1)).replace(microsecond=0)
        renewal = start + timedelta(days=90)
        subscription = _create_subscription(
            _create_user(), start_date=start, renewal_date=renewal,
        )
        assert as_utc(subscription.renewal_date) == renewal

    def test_start_date_defaults_to_now(self, app):
        before = utc_now()
        subscription = _create_subscription(_create_user(), frequency="weekly")
        assert as_utc(subscription.start_date) >= before


class TestExpiry:

    def test_past_renewal_expires_on_insert(self, app):
        start = utc_now() - timedelta(days=60)
        subscription = _create_subscription(_create_user(), start_date=start)

        assert subscription.status == "expired"

    def test_past_renewal_expires_on_update(self, app):
        subscription = _create_subscription(_create_user())
        repo = SubscriptionRepository()

        repo.update(
            subscription,
            start_date=utc_now() - timedelta(days=10),
            renewal_date=utc_now() - timedelta(days=1),
        )
        repo.commit()

        assert db.session.get(Subscription, subscription.id).status == "expired"

    def test_to_dict_includes_owner_snapshot(self, app):
        subscription = _create_subscription(_create_user())
        data = subscription.to_dict(include_user=True)

        assert data["user"]["email"] == "ada@example.com"
        assert "password_hash" not in data["user"]
        assert data["renewal_date"].endswith("+00:00")
