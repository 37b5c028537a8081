from tortoise import fields, models

MODEL_NAME_MAX_LENGTH = 50


class PromptRequest(models.Model):
    """
    One accepted prompt submission and the answer the model produced.
    Written once, never updated; removed together with its user.
    """
    id = fields.IntField(pk=True)
    user = fields.ForeignKeyField(
        "models.User",
        related_name="requests",
        on_delete=fields.CASCADE,
    )
    prompt = fields.TextField()
    answer = fields.TextField(null=True)
    model = fields.CharField(max_length=MODEL_NAME_MAX_LENGTH)
    created_at = fields.DatetimeField(auto_now_add=True)
    updated_at = fields.DatetimeField(auto_now=True)

    class Meta:
        table = "requests"
