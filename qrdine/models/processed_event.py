from tortoise import fields, models


class ProcessedEvent(models.Model):
    """
    Idempotency ledger for external events (payment confirmations). Stores the
    id of every handled event so a redelivered event is applied only once.
    """
    id = fields.IntField(primary_key=True)
    event_id = fields.CharField(max_length=128, unique=True)
    event_type = fields.CharField(max_length=128)
    created_at = fields.DatetimeField(auto_now_add=True)

    class Meta:
        table = "processed_events"
