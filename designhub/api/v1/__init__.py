"""API v1 routes."""

from fastapi import APIRouter

from designhub.api.v1 import auth, catalog, health, messages, orders, payment, profile

router = APIRouter()
router.include_router(health.router, prefix="/health", tags=["health"])
router.include_router(auth.router, prefix="/auth", tags=["auth"])
router.include_router(catalog.software_router, prefix="/software", tags=["software"])
router.include_router(catalog.services_router, prefix="/services", tags=["services"])
router.include_router(catalog.designers_router, prefix="/designers", tags=["designers"])
router.include_router(profile.router, prefix="/profile", tags=["profile"])
router.include_router(payment.router, prefix="/payment-methods", tags=["payment"])
router.include_router(orders.router, prefix="/orders", tags=["orders"])
router.include_router(messages.router, prefix="/messages", tags=["messages"])
