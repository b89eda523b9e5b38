from django.apps import AppConfig
from django.db.models.signals import post_migrate

class PayrollAppConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "payroll"

    def ready(self):
        from accounts.groups import setup_payroll_groups

        def handler(sender, **kwargs):
            # sender is the app config that just migrated
            if sender.name == "payroll":
                setup_payroll_groups()

        post_migrate.connect(handler, dispatch_uid="payroll_setup_groups")
