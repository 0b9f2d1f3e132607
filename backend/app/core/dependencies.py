"""
Collaborator and service dependencies for FastAPI.

Each external collaborator (identity service, payment gateway) is provided
through a dependency so tests can swap it with app.dependency_overrides.
Services are built per request on top of that request's document store.
"""

from fastapi import Depends
from backend.app.core.config import settings
from backend.app.core.identity import IdentityVerifier
from backend.app.db.gateway import DocumentStore, get_store
from backend.app.services.parcel_lifecycle import ParcelLifecycle
from backend.app.services.payment_processor import PaymentProcessor
from backend.app.services.rider_registry import RiderRegistry
from backend.app.services.tracking_log import TrackingLog
from backend.app.services.user_directory import UserDirectory


def get_identity_verifier() -> IdentityVerifier:
    """Identity verifier configured from settings."""
    return IdentityVerifier.from_settings()


def get_payment_processor() -> PaymentProcessor:
    """Payment gateway client configured from settings."""
    return PaymentProcessor(
        api_key=settings.payment_api_key,
        base_url=settings.payment_api_base,
    )


def get_lifecycle(store: DocumentStore = Depends(get_store)) -> ParcelLifecycle:
    return ParcelLifecycle(store)


def get_tracking_log(store: DocumentStore = Depends(get_store)) -> TrackingLog:
    return TrackingLog(store)


def get_user_directory(store: DocumentStore = Depends(get_store)) -> UserDirectory:
    return UserDirectory(store)


def get_rider_registry(store: DocumentStore = Depends(get_store)) -> RiderRegistry:
    return RiderRegistry(store)
