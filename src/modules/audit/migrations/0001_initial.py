import uuid6
from django.db import migrations, models


class Migration(migrations.Migration):
    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="AuditEvent",
            fields=[
                (
                    "id",
                    models.UUIDField(
                        default=uuid6.uuid7,
                        editable=False,
                        primary_key=True,
                        serialize=False,
                    ),
                ),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("ts", models.DateTimeField(db_index=True)),
                (
                    "action",
                    models.CharField(
                        choices=[
                            ("ORDER_CREATED", "Order created"),
                            ("ORDER_UPDATED", "Order updated"),
                            ("ORDER_STATUS_CHANGED", "Order status changed"),
                            ("INVENTORY_DECREMENTED", "Inventory decremented"),
                            ("INVENTORY_RESTOCKED", "Inventory restocked"),
                            ("STOCK_ADJUSTED", "Stock adjusted"),
                            ("VARIANT_STOCK_ADJUSTED", "Variant stock adjusted"),
                        ],
                        max_length=50,
                    ),
                ),
                (
                    "entity_type",
                    models.CharField(
                        blank=True,
                        choices=[("order", "Order"), ("product", "Product")],
                        default="",
                        max_length=20,
                    ),
                ),
                (
                    "entity_id",
                    models.CharField(blank=True, default="", max_length=64),
                ),
                (
                    "entity_label",
                    models.CharField(blank=True, default="", max_length=255),
                ),
                ("actor_id", models.CharField(max_length=64)),
                ("actor_name", models.CharField(max_length=255)),
                (
                    "actor_role",
                    models.CharField(blank=True, default="", max_length=50),
                ),
                ("changes", models.JSONField(blank=True, default=list)),
                ("metadata", models.JSONField(blank=True, default=dict)),
            ],
            options={
                "db_table": "audit_events",
                "ordering": ["ts", "created_at"],
                "indexes": [
                    models.Index(
                        fields=["entity_type", "entity_id"], name="audit_entity_idx"
                    ),
                    models.Index(fields=["action"], name="audit_action_idx"),
                ],
            },
        ),
    ]
