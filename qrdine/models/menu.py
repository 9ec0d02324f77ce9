from tortoise import fields, models

# Display order of the well-known categories; anything else is listed after them.
CATEGORY_ORDER = ("Starters", "Mains", "Desserts", "Drinks")


class MenuItem(models.Model):
    id = fields.IntField(primary_key=True)
    tenant = fields.ForeignKeyField("models.Tenant", related_name="menu_items", on_delete=fields.CASCADE)
    name = fields.CharField(max_length=255)
    description = fields.TextField(default="")
    price = fields.DecimalField(max_digits=10, decimal_places=2)
    category = fields.CharField(max_length=50)
    image = fields.TextField(null=True)
    is_vegetarian = fields.BooleanField(default=False)
    is_spicy = fields.BooleanField(default=False)
    is_out_of_stock = fields.BooleanField(default=False)
    # Written only by the rating aggregator, always recomputed from the ratings table
    rating_average = fields.DecimalField(max_digits=3, decimal_places=2, default=0)
    rating_count = fields.IntField(default=0)
    created_at = fields.DatetimeField(auto_now_add=True)
    updated_at = fields.DatetimeField(auto_now=True)

    class Meta:
        table = "menu_items"
        indexes = [
            ("tenant_id",),              # Tenant menu queries
            ("category",),
            ("tenant_id", "is_out_of_stock"),  # Composite: orderable items
        ]

    @property
    def category_rank(self):
        try:
            return CATEGORY_ORDER.index(self.category)
        except ValueError:
            return len(CATEGORY_ORDER)

    def sort_key(self):
        return (self.category_rank, self.category, self.name)
