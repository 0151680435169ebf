from fastapi import APIRouter
from starlette import status
from schemas.catalog_schemas import (SubscriptionRequest, SubscriptionUpdateRequest, SubscriptionResponse,
                                     NewsletterRequest, NewsletterUpdateRequest, NewsletterResponse)
from services.subscription_service import SubscriptionService
from utils.deps import db_dependency, admin_dependency


router = APIRouter(
    prefix="/api",
    tags=["subscriptions"]
)


@router.get("/subscriptions", response_model=list[SubscriptionResponse])
def list_subscriptions(admin: admin_dependency, db: db_dependency):
    return SubscriptionService.list_subscriptions(db)


@router.post("/subscriptions", status_code=status.HTTP_201_CREATED, response_model=SubscriptionResponse)
def create_subscription(body: SubscriptionRequest, db: db_dependency):
    return SubscriptionService.create_subscription(body, db)


@router.get("/subscriptions/{subscription_id}", response_model=SubscriptionResponse)
def get_subscription(subscription_id: int, db: db_dependency):
    return SubscriptionService.get_subscription(subscription_id, db)


@router.put("/subscriptions/{subscription_id}", response_model=SubscriptionResponse)
def update_subscription(subscription_id: int, body: SubscriptionUpdateRequest, db: db_dependency):
    return SubscriptionService.update_subscription(subscription_id, body, db)


@router.get("/newsletter-subscriptions", response_model=list[NewsletterResponse])
def list_newsletter_subscriptions(admin: admin_dependency, db: db_dependency):
    return SubscriptionService.list_newsletter_subscriptions(db)


@router.post("/newsletter-subscriptions", status_code=status.HTTP_201_CREATED, response_model=NewsletterResponse)
def subscribe_newsletter(body: NewsletterRequest, db: db_dependency):
    return SubscriptionService.subscribe_newsletter(body, db)


@router.get("/newsletter-subscriptions/{email}", response_model=NewsletterResponse)
def get_newsletter_subscription(email: str, db: db_dependency):
    return SubscriptionService.get_newsletter_subscription(email, db)


@router.put("/newsletter-subscriptions/{email}", response_model=NewsletterResponse)
def update_newsletter_subscription(email: str, body: NewsletterUpdateRequest, db: db_dependency):
    return SubscriptionService.update_newsletter_status(email, body.status, db)
