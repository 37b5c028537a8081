import datetime as dt
from tortoise import fields, models, timezone


class VerificationCode(models.Model):
    """
    Pending SMS verification for a user that has not validated its phone yet.
    - code: six-digit numeric string sent by SMS
    - phone: number the code was sent to (must match at validation)
    - expires_at: codes past this instant are refused and swept
    """
    id = fields.IntField(pk=True)
    user = fields.OneToOneField(
        "models.User",
        related_name="verification",
        on_delete=fields.CASCADE,
    )
    code = fields.CharField(max_length=6)
    phone = fields.CharField(max_length=15)
    expires_at = fields.DatetimeField()
    created_at = fields.DatetimeField(auto_now_add=True)

    class Meta:
        table = "verification_codes"

    def is_expired(self, now: dt.datetime | None = None) -> bool:
        return self.expires_at <= (now or timezone.now())
