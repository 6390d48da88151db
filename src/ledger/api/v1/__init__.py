"""API version 1 routes."""

from fastapi import APIRouter

from ledger.api.v1 import transactions

router = APIRouter(prefix="/api/v1")

# Include routers
router.include_router(transactions.router)
