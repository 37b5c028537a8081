"""
Database model for users.
Represents a registered phone user, its subscription tier and remaining request quota.
"""
from enum import Enum
from tortoise import fields, models


class Tier(str, Enum):
    """Subscription tier; decides the quota ceiling and admin privileges."""
    FREE = "FREE"
    PREMIUM = "PREMIUM"
    ADMINISTRATOR = "ADMINISTRATOR"


class User(models.Model):
    """
    User database model.

    Relationships:
    - Has many PromptRequests (one-to-many, via related_name="requests")
    - Has at most one pending VerificationCode

    A null ``token`` means the phone number was never validated.
    """
    id = fields.IntField(pk=True)
    phone = fields.CharField(max_length=15, unique=True)
    nickname = fields.CharField(max_length=50, unique=True, index=True)
    email = fields.CharField(max_length=100, unique=True)
    tier = fields.CharEnumField(Tier, max_length=16, default=Tier.FREE)
    remaining_requests = fields.IntField(default=0)  # Never below zero, see services.quota
    password_hash = fields.CharField(max_length=255)  # Argon2 hash, never plain text
    token = fields.CharField(max_length=512, null=True)  # Bearer token issued at phone validation
    created_at = fields.DatetimeField(auto_now_add=True)
    updated_at = fields.DatetimeField(auto_now=True)

    class Meta:
        """Tortoise ORM metadata configuration."""
        table = "users"

    @property
    def tier_name(self) -> str:
        return Tier(self.tier).value

    @property
    def is_verified(self) -> bool:
        return self.token is not None

    @property
    def is_admin(self) -> bool:
        return self.tier == Tier.ADMINISTRATOR
