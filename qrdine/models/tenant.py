from tortoise import fields, models


class Tenant(models.Model):
    """
    A restaurant account. Every menu item, order, rating and staff record is
    owned by exactly one tenant through a non-nullable foreign key, and is
    removed with it (cascade).
    """
    id = fields.IntField(primary_key=True)
    display_name = fields.CharField(max_length=255)
    email = fields.CharField(max_length=255, unique=True)
    table_count = fields.IntField(null=True)  # None means the platform default applies
    created_at = fields.DatetimeField(auto_now_add=True)
    updated_at = fields.DatetimeField(auto_now=True)

    class Meta:
        table = "tenants"

    def __str__(self):
        return self.display_name
