"""
Database models module initialization.
Exports all Tortoise ORM models for convenient imports throughout the application.

Models exported:
- User: Phone-verified account with tier and remaining quota
- PromptRequest: Prompt/answer history (belongs to User)
- LogEntry: Operational log rows read by the admin log endpoint
- VerificationCode: Pending SMS codes (belongs to User)
"""
from .user import User, Tier
from .prompt_request import PromptRequest
from .log_entry import LogEntry, LOG_LEVELS, LOG_CATEGORIES
from .verification import VerificationCode
