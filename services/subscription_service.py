from sqlalchemy.orm import Session
from core.exceptions import ConflictError, NotFoundError, ValidationError
from models.subscriptions import Subscription, NewsletterSubscription
from models.users import User
from schemas.catalog_schemas import (SubscriptionRequest, SubscriptionUpdateRequest,
                                     NewsletterRequest)
from utils.logger import get_logger

logger = get_logger(__name__)


class SubscriptionService:

    @staticmethod
    def list_subscriptions(db: Session) -> list[Subscription]:
        return db.query(Subscription).order_by(Subscription.created_at.desc(), Subscription.id.desc()).all()

    @staticmethod
    def get_subscription(subscription_id: int, db: Session) -> Subscription:
        subscription = db.query(Subscription).filter(Subscription.id == subscription_id).one_or_none()
        if not subscription:
            raise NotFoundError("Subscription not found")
        return subscription

    @staticmethod
    def create_subscription(body: SubscriptionRequest, db: Session) -> Subscription:
        if not db.query(User).filter(User.id == body.user_id).first():
            raise ValidationError("User does not exist")

        values = body.model_dump(exclude_none=True)
        subscription = Subscription(**values)
        db.add(subscription)
        db.commit()
        db.refresh(subscription)

        logger.info(
            "Subscription created",
            extra={"subscription_id": subscription.id, "user_id": subscription.user_id, "plan": subscription.plan}
        )
        return subscription

    @staticmethod
    def update_subscription(subscription_id: int, body: SubscriptionUpdateRequest, db: Session) -> Subscription:
        subscription = SubscriptionService.get_subscription(subscription_id, db)

        for field, value in body.model_dump(exclude_unset=True).items():
            if value is None and field in ("plan", "status"):
                raise ValidationError(f"{field} cannot be null")
            setattr(subscription, field, value)

        db.commit()
        db.refresh(subscription)
        return subscription

    @staticmethod
    def list_newsletter_subscriptions(db: Session) -> list[NewsletterSubscription]:
        return (
            db.query(NewsletterSubscription)
            .order_by(NewsletterSubscription.created_at.desc(), NewsletterSubscription.id.desc())
            .all()
        )

    @staticmethod
    def get_newsletter_subscription(email: str, db: Session) -> NewsletterSubscription:
        subscription = db.query(NewsletterSubscription).filter(
            NewsletterSubscription.email == email.strip().lower()
        ).one_or_none()
        if not subscription:
            raise NotFoundError("Newsletter subscription not found")
        return subscription

    @staticmethod
    def subscribe_newsletter(body: NewsletterRequest, db: Session) -> NewsletterSubscription:
        if db.query(NewsletterSubscription).filter(NewsletterSubscription.email == body.email).first():
            raise ConflictError("Email already subscribed")

        subscription = NewsletterSubscription(email=body.email, status=body.status or "active")
        db.add(subscription)
        db.commit()
        db.refresh(subscription)

        logger.info("Newsletter subscription created", extra={"subscription_id": subscription.id})
        return subscription

    @staticmethod
    def update_newsletter_status(email: str, status: str, db: Session) -> NewsletterSubscription:
        subscription = SubscriptionService.get_newsletter_subscription(email, db)
        subscription.status = status
        db.commit()
        db.refresh(subscription)
        return subscription
