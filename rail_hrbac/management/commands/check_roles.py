"""
Management command compiling the configured HRBAC roles.
"""

import json

from django.core.management.base import BaseCommand, CommandError

from rail_hrbac.rbac.engine import HRBAC
from rail_hrbac.rbac.exceptions import ConfigError
from rail_hrbac.rbac.types import EngineOptions
from rail_hrbac.role_loader import load_configured_roles


class Command(BaseCommand):
    help = "Compile the configured roles and optionally check one operation."

    def add_arguments(self, parser):
        parser.add_argument(
            "--role",
            action="append",
            default=None,
            help="Role to check (repeat for a multi-role check).",
        )
        parser.add_argument(
            "--operation",
            default=None,
            help="Operation to check for --role.",
        )
        parser.add_argument(
            "--params",
            default="{}",
            help="JSON object passed as params to the check.",
        )

    def handle(self, *args, **options):
        try:
            engine = HRBAC(load_configured_roles(), EngineOptions.from_settings())
        except ConfigError as exc:
            raise CommandError(f"Invalid role configuration: {exc}") from exc

        roles = options.get("role")
        operation = options.get("operation")
        if roles and operation:
            self._check(engine, roles, operation, options["params"])
            return

        for name, role in engine.roles.items():
            inherits = ", ".join(role.inherits) or "-"
            self.stdout.write(
                f"{name}: {len(role.exact)} exact, {len(role.wildcards)} wildcard, "
                f"inherits {inherits}"
            )
        self.stdout.write(self.style.SUCCESS(f"{len(engine.roles)} roles compiled"))

    def _check(self, engine, roles, operation, raw_params):
        try:
            params = json.loads(raw_params)
        except json.JSONDecodeError as exc:
            raise CommandError(f"--params is not valid JSON: {exc}") from exc
        if not isinstance(params, dict):
            raise CommandError("--params must be a JSON object")

        role = roles[0] if len(roles) == 1 else roles
        try:
            decision = engine.can_sync(role, operation, params)
        except ConfigError as exc:
            raise CommandError(str(exc)) from exc

        self.stdout.write(json.dumps(decision.as_dict(), default=str, sort_keys=True))
        if decision.permission:
            self.stdout.write(self.style.SUCCESS(f"{operation}: permitted"))
        else:
            self.stdout.write(self.style.WARNING(f"{operation}: denied"))
