"""Management command to print loyalty dashboard figures."""

from django.core.management.base import BaseCommand

from carimbo.services import dashboard


class Command(BaseCommand):
    help = "Print dashboard statistics and coupons issued per week and month"

    def add_arguments(self, parser):
        parser.add_argument(
            "--weeks",
            type=int,
            default=None,
            help="Override DASHBOARD_WEEKS setting",
        )
        parser.add_argument(
            "--months",
            type=int,
            default=None,
            help="Override DASHBOARD_MONTHS setting",
        )

    def handle(self, *args, **options):
        data = dashboard.load()
        stats = dashboard.stats(data)

        self.stdout.write(f"Clients: {stats.total_clients}")
        self.stdout.write(f"Active coupons: {stats.active_coupons}")
        self.stdout.write(f"Purchases today: {stats.purchases_today}")
        self.stdout.write(f"Stamps on open cards: {stats.total_stamps}")
        if not data.coupons_available:
            self.stdout.write(self.style.WARNING("Coupons could not be loaded."))

        self.stdout.write("")
        self.stdout.write("Coupons per week:")
        for bucket in dashboard.weekly_coupon_counts(data.coupons, weeks=options["weeks"]):
            self.stdout.write(f"  {bucket.label}: {bucket.coupons}")

        self.stdout.write("Coupons per month:")
        for bucket in dashboard.monthly_coupon_counts(data.coupons, months=options["months"]):
            self.stdout.write(f"  {bucket.label}: {bucket.coupons}")

        self.stdout.write(self.style.SUCCESS("Done."))
