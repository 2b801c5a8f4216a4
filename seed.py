"""Seed script: populates the database with a demo user and subscriptions.

Each subscription is created through SubscriptionService so its reminder
workflow is scheduled exactly as the API would schedule it.

Usage:
    flask shell
    >>> exec(open('seed.py').read())

Or run directly:
    python seed.py
"""

from datetime import timedelta

from werkzeug.security import generate_password_hash

from app import create_app
from app.domain.clock import utc_now
from app.domain.models import User
from app.extensions import db
from app.services.subscription_service import SubscriptionService


def seed():
    """Insert a demo user with a handful of subscriptions."""
    app = create_app("development")

    with app.app_context():
        db.create_all()

        # Check if already seeded
        if User.query.filter_by(email="demo@example.com").first():
            print("⚠ Seed data already exists, skipping.")
            return

        demo = User(
            name="Demo User",
            email="demo@example.com",
            password_hash=generate_password_hash("demo1234"),
        )
        db.session.add(demo)
        db.session.commit()

        now = utc_now()
        service = SubscriptionService()
        for fields in (
            {
                "name": "Netflix Premium", "price": 15.99, "currency": "USD",
                "frequency": "monthly", "category": "entertainment",
                "payment_method": "Credit Card",
                "start_date": now - timedelta(days=25),
            },
            {
                "name": "Financial Times", "price": 39.0, "currency": "GBP",
                "frequency": "monthly", "category": "news",
                "payment_method": "PayPal",
                "start_date": now - timedelta(days=2),
                "renewal_date": now + timedelta(days=6),
            },
            {
                "name": "Gym Membership", "price": 480.0, "currency": "EUR",
                "frequency": "yearly", "category": "sports",
                "payment_method": "Debit Card",
                "start_date": now - timedelta(days=400),
            },
        ):
            result = service.create_subscription(demo, **fields)
            print(f"  {fields['name']}: status={result['subscription']['status']} "
                  f"run={result['workflowRunId']}")

        print("✓ Seed data inserted successfully (login: demo@example.com / demo1234).")


if __name__ == "__main__":
    seed()
