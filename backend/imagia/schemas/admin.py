"""
Pydantic schemas for admin endpoints.
Defines request models for plan changes and quota overrides.
"""
from pydantic import BaseModel, Field, StrictInt
from typing import Optional

from .auth import AuthenticatedIn


class PlanUpdateIn(AuthenticatedIn):
    """Move a user to another plan; quota is reset to the new ceiling."""
    nickname: Optional[str] = None  # Target user
    plan: Optional[str] = None  # FREE or PREMIUM


class AvailableRequestsIn(AuthenticatedIn):
    """Overwrite a user's remaining requests."""
    nickname: Optional[str] = None  # Target user
    availableRequests: Optional[StrictInt] = Field(default=None, description="New remaining quota, >= 0")
