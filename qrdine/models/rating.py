from tortoise import fields, models


class Rating(models.Model):
    """
    One rating per (order, menu item). The tenant is always copied from the
    parent order, never taken from the caller.
    """
    id = fields.IntField(primary_key=True)
    menu_item = fields.ForeignKeyField("models.MenuItem", related_name="ratings", on_delete=fields.CASCADE)
    order = fields.ForeignKeyField("models.Order", related_name="ratings", on_delete=fields.CASCADE)
    tenant = fields.ForeignKeyField("models.Tenant", related_name="ratings", on_delete=fields.CASCADE)
    customer = fields.ForeignKeyField(
        "models.Customer", related_name="ratings", null=True, on_delete=fields.SET_NULL
    )
    rating = fields.SmallIntField()
    review = fields.TextField(null=True)
    created_at = fields.DatetimeField(auto_now_add=True)
    updated_at = fields.DatetimeField(auto_now=True)

    class Meta:
        table = "ratings"
        unique_together = (("order", "menu_item"),)
        indexes = [
            ("menu_item_id",),
            ("tenant_id",),
        ]
