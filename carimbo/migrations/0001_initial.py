# Generated migration for Client, Purchase and Coupon

from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="Client",
            fields=[
                (
                    "cpf",
                    models.CharField(
                        help_text="Apenas números (11 dígitos)",
                        max_length=11,
                        primary_key=True,
                        serialize=False,
                        verbose_name="CPF",
                    ),
                ),
                ("name", models.CharField(max_length=200, verbose_name="nome")),
                ("phone", models.CharField(max_length=20, verbose_name="telefone")),
                ("email", models.EmailField(max_length=254, verbose_name="email")),
                (
                    "birth_date",
                    models.DateField(blank=True, null=True, verbose_name="data de nascimento"),
                ),
                (
                    "current_stamps",
                    models.PositiveIntegerField(
                        default=0,
                        help_text="Carimbos na cartela atual",
                        verbose_name="carimbos atuais",
                    ),
                ),
                (
                    "last_purchase_at",
                    models.DateTimeField(blank=True, null=True, verbose_name="última compra"),
                ),
                ("created_at", models.DateTimeField(auto_now_add=True, verbose_name="criado em")),
                ("updated_at", models.DateTimeField(auto_now=True, verbose_name="atualizado em")),
            ],
            options={
                "verbose_name": "cliente",
                "verbose_name_plural": "clientes",
                "ordering": ["name"],
                "indexes": [models.Index(fields=["name"], name="carimbo_client_name_idx")],
            },
        ),
        migrations.CreateModel(
            name="Purchase",
            fields=[
                (
                    "id",
                    models.BigAutoField(
                        auto_created=True, primary_key=True, serialize=False, verbose_name="ID"
                    ),
                ),
                (
                    "client_cpf",
                    models.CharField(db_index=True, max_length=11, verbose_name="CPF do cliente"),
                ),
                (
                    "amount",
                    models.DecimalField(
                        decimal_places=2, max_digits=12, verbose_name="valor da compra"
                    ),
                ),
                (
                    "stamps_generated",
                    models.PositiveIntegerField(default=0, verbose_name="carimbos gerados"),
                ),
                ("created_at", models.DateTimeField(db_index=True, verbose_name="data")),
            ],
            options={
                "verbose_name": "compra",
                "verbose_name_plural": "compras",
                "indexes": [
                    models.Index(
                        fields=["client_cpf", "-created_at"], name="carimbo_purchase_cpf_date_idx"
                    )
                ],
            },
        ),
        migrations.CreateModel(
            name="Coupon",
            fields=[
                (
                    "id",
                    models.BigAutoField(
                        auto_created=True, primary_key=True, serialize=False, verbose_name="ID"
                    ),
                ),
                (
                    "client_cpf",
                    models.CharField(db_index=True, max_length=11, verbose_name="CPF do cliente"),
                ),
                ("code", models.CharField(max_length=32, unique=True, verbose_name="código")),
                (
                    "discount_rate",
                    models.DecimalField(
                        decimal_places=2,
                        help_text="Fração do valor (0.15 = 15%)",
                        max_digits=4,
                        verbose_name="desconto",
                    ),
                ),
                ("used", models.BooleanField(default=False, verbose_name="usado")),
                ("issued_at", models.DateTimeField(db_index=True, verbose_name="criado em")),
                ("valid_until", models.DateTimeField(verbose_name="válido até")),
            ],
            options={
                "verbose_name": "cupom",
                "verbose_name_plural": "cupons",
                "indexes": [
                    models.Index(
                        fields=["client_cpf", "-issued_at"], name="carimbo_coupon_cpf_date_idx"
                    )
                ],
            },
        ),
    ]
