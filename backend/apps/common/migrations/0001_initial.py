from django.db import migrations, models


def _catalog(name, **options):
    return migrations.CreateModel(
        name=name,
        fields=[
            ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
            ("name", models.CharField(max_length=50, unique=True)),
        ],
        options=options,
    )


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        _catalog("Location"),
        migrations.CreateModel(
            name="Sport",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("name", models.CharField(max_length=50, unique=True)),
                ("icon_key", models.CharField(blank=True, default="", max_length=50)),
            ],
        ),
        _catalog("Status", verbose_name_plural="statuses"),
        _catalog("Payment"),
        _catalog("Delivery", verbose_name_plural="deliveries"),
        _catalog("InvoiceType"),
    ]
