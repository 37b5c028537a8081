"""
Database model for operational log entries.
Rows are appended by ``imagia.core.events`` and read back by the admin log endpoint.
"""
from tortoise import fields, models

# Closed sets used to bucket entries in the admin view
LOG_LEVELS = ("DEBUG", "INFO", "WARN", "ERROR")
LOG_CATEGORIES = ("USER", "AUTH", "QUOTE", "PROMPT", "MODELS", "ADMIN", "SMS", "SERVER")


class LogEntry(models.Model):
    id = fields.IntField(pk=True)
    # Plain strings rather than enums: rows written by older deployments may hold other values
    level = fields.CharField(max_length=16)
    category = fields.CharField(max_length=50)
    message = fields.TextField()
    created_at = fields.DatetimeField(auto_now_add=True, index=True)
    updated_at = fields.DatetimeField(auto_now=True)

    class Meta:
        table = "logs"
