from enum import Enum
from tortoise import fields, models


class Role(str, Enum):
    ADMIN = "ADMIN"
    STAFF = "STAFF"
    KITCHEN = "KITCHEN"
    CUSTOMER = "CUSTOMER"


class Customer(models.Model):
    # Customers are global: one account can order at any restaurant.
    id = fields.IntField(primary_key=True)
    email = fields.CharField(max_length=255, unique=True)
    name = fields.CharField(max_length=255)
    created_at = fields.DatetimeField(auto_now_add=True)

    class Meta:
        table = "customers"


class StaffMember(models.Model):
    id = fields.IntField(primary_key=True)
    tenant = fields.ForeignKeyField("models.Tenant", related_name="staff_members", on_delete=fields.CASCADE)
    email = fields.CharField(max_length=255)
    name = fields.CharField(max_length=255)
    created_at = fields.DatetimeField(auto_now_add=True)

    class Meta:
        table = "staff_members"
        unique_together = (("email", "tenant"),)


class KitchenMember(models.Model):
    id = fields.IntField(primary_key=True)
    tenant = fields.ForeignKeyField("models.Tenant", related_name="kitchen_members", on_delete=fields.CASCADE)
    email = fields.CharField(max_length=255)
    name = fields.CharField(max_length=255)
    created_at = fields.DatetimeField(auto_now_add=True)

    class Meta:
        table = "kitchen_members"
        unique_together = (("email", "tenant"),)


# Closed set of per-tenant member stores, selected by Role only.
MEMBER_MODELS = {
    Role.STAFF: StaffMember,
    Role.KITCHEN: KitchenMember,
}
