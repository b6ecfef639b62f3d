"""
Terminal front end for the admin console API.

    admin-console login admin@x.io
    admin-console departments create "Information Technology" it --limit 1500
    admin-console users create "Ana Ortiz" ana@x.io OFFICER --department 1
    admin-console users update 2 --inactive

The token is kept in ADMIN_CONSOLE_TOKEN_FILE between invocations.
"""

import argparse
import getpass
import sys
from typing import Callable, TextIO

from pydantic_settings import BaseSettings

from admin_console.client.api import (
    ROLES, UNSET, AccessDenied, ApiError, ApiUnreachable, AuthenticationRequired, ConsoleClient,
    Department, UserRecord, ValidationFailed, total_limit,
)
from admin_console.client.session import SessionHolder


class ClientSettings(BaseSettings):
    URL:        str = "http://localhost:8000/api/v1"
    TOKEN_FILE: str = "~/.admin_console/session.json"

    model_config = {"env_prefix": "ADMIN_CONSOLE_", "case_sensitive": True, "extra": "ignore"}


# ─── Rendering ────────────────────────────────────────────────────────────────
def render_departments(departments: list[Department], out: TextIO) -> None:
    out.write(f"{'ID':>4}  {'CODE':<10} {'NAME':<30} {'LIMIT (USD)':>14}\n")
    for d in departments:
        out.write(f"{d.id:>4}  {d.code:<10} {d.name:<30} {'$' + d.limitUsd:>14}\n")
    out.write(f"Total allocated limit (all departments): ${total_limit(departments)}\n")


def render_users(users: list[UserRecord], out: TextIO) -> None:
    out.write(f"{'ID':>4}  {'NAME':<24} {'EMAIL':<30} {'ROLE':<8} {'DEPT':<10} ACTIVE\n")
    for u in users:
        dept = u.department.code if u.department else "-"
        active = "yes" if u.isActive else "no"
        out.write(f"{u.id:>4}  {u.name:<24} {u.email:<30} {u.role:<8} {dept:<10} {active}\n")


def render_user(u: UserRecord, out: TextIO) -> None:
    dept = f"{u.department.code} (#{u.department.id})" if u.department else "-"
    out.write(f"#{u.id} {u.name} <{u.email}> role={u.role} department={dept} "
              f"active={'yes' if u.isActive else 'no'}\n")


def render_department(d: Department, out: TextIO) -> None:
    out.write(f"#{d.id} {d.code} {d.name} limit=${d.limitUsd}\n")


# ─── Screens ──────────────────────────────────────────────────────────────────
def _ask_password(args: argparse.Namespace, attr: str = "password", prompt: str = "Password: ") -> str:
    value = getattr(args, attr, None)
    return value if value else getpass.getpass(prompt)


def cmd_login(client: ConsoleClient, args: argparse.Namespace, out: TextIO) -> int:
    result = client.login(args.email, _ask_password(args))
    out.write(f"Logged in as {result.name} <{result.user.email}> ({result.user.role})\n")
    return cmd_dashboard(client, args, out)


def cmd_logout(client: ConsoleClient, args: argparse.Namespace, out: TextIO) -> int:
    client.logout()
    out.write("Logged out.\n")
    return 0


def cmd_dashboard(client: ConsoleClient, args: argparse.Namespace, out: TextIO) -> int:
    user = client.refresh()
    if user is None:
        out.write("Not logged in. Run: admin-console login <email>\n")
        return 1
    if user.is_admin:
        out.write("Admin Dashboard\n")
        out.write(f"Logged in as: {user.email}\n")
        out.write("  admin-console departments list   Manage Departments\n")
        out.write("  admin-console users list         Manage Users\n")
    else:
        dept = f"department #{user.departmentId}" if user.departmentId else "no department"
        out.write(f"Logged in as: {user.email} ({user.role}, {dept})\n")
        out.write("  admin-console departments list   View Departments\n")
    return 0


def cmd_departments_list(client: ConsoleClient, args: argparse.Namespace, out: TextIO) -> int:
    render_departments(client.list_departments(), out)
    return 0


def cmd_departments_create(client: ConsoleClient, args: argparse.Namespace, out: TextIO) -> int:
    render_department(client.create_department(args.name, args.code, args.limit), out)
    return 0


def cmd_departments_rename(client: ConsoleClient, args: argparse.Namespace, out: TextIO) -> int:
    render_department(client.update_department(args.id, name=args.name, code=args.code), out)
    return 0


def cmd_departments_set_limit(client: ConsoleClient, args: argparse.Namespace, out: TextIO) -> int:
    render_department(client.update_department_limit(args.id, args.amount), out)
    return 0


def cmd_users_list(client: ConsoleClient, args: argparse.Namespace, out: TextIO) -> int:
    render_users(client.list_users(), out)
    return 0


def cmd_users_create(client: ConsoleClient, args: argparse.Namespace, out: TextIO) -> int:
    user = client.create_user(
        args.name, args.email, _ask_password(args), args.role, department_id=args.department,
    )
    render_user(user, out)
    return 0


def cmd_users_update(client: ConsoleClient, args: argparse.Namespace, out: TextIO) -> int:
    department = UNSET
    if args.department is not None:
        department = None if args.department.lower() == "none" else int(args.department)
    user = client.update_user(
        args.id,
        name=args.name if args.name is not None else UNSET,
        email=args.email if args.email is not None else UNSET,
        role=args.role if args.role is not None else UNSET,
        department_id=department,
        is_active=args.active if args.active is not None else UNSET,
    )
    render_user(user, out)
    return 0


def cmd_users_reset_password(client: ConsoleClient, args: argparse.Namespace, out: TextIO) -> int:
    user = client.reset_user_password(args.id, _ask_password(args, prompt="New password: "))
    out.write(f"Password reset for {user.email}\n")
    return 0


# ─── Parser ───────────────────────────────────────────────────────────────────
def _department_ref(value: str) -> str:
    if value.lower() != "none" and not value.isdigit():
        raise argparse.ArgumentTypeError("expected a department id or 'none'")
    return value


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="admin-console", description="Department budget admin console.")
    parser.add_argument("--url", help="API base URL (default: $ADMIN_CONSOLE_URL)")
    commands = parser.add_subparsers(dest="command", required=True)

    p = commands.add_parser("login", help="Log in and store the session token")
    p.add_argument("email")
    p.add_argument("--password", help="omit to be prompted")
    p.set_defaults(handler=cmd_login)

    commands.add_parser("logout", help="Discard the stored session").set_defaults(handler=cmd_logout)
    commands.add_parser("whoami", help="Show the dashboard for the current session").set_defaults(
        handler=cmd_dashboard)

    # departments
    deps = commands.add_parser("departments", help="Department management").add_subparsers(
        dest="action", required=True)
    deps.add_parser("list").set_defaults(handler=cmd_departments_list)

    p = deps.add_parser("create")
    p.add_argument("name")
    p.add_argument("code")
    p.add_argument("--limit", help="allocated limit in USD (default 0)")
    p.set_defaults(handler=cmd_departments_create)

    p = deps.add_parser("rename")
    p.add_argument("id", type=int)
    p.add_argument("--name")
    p.add_argument("--code")
    p.set_defaults(handler=cmd_departments_rename)

    p = deps.add_parser("set-limit")
    p.add_argument("id", type=int)
    p.add_argument("amount")
    p.set_defaults(handler=cmd_departments_set_limit)

    # users
    users = commands.add_parser("users", help="User management (admin only)").add_subparsers(
        dest="action", required=True)
    users.add_parser("list").set_defaults(handler=cmd_users_list)

    p = users.add_parser("create")
    p.add_argument("name")
    p.add_argument("email")
    p.add_argument("role", choices=ROLES)
    p.add_argument("--department", type=int, help="department id (required for OFFICER)")
    p.add_argument("--password", help="omit to be prompted")
    p.set_defaults(handler=cmd_users_create)

    p = users.add_parser("update")
    p.add_argument("id", type=int)
    p.add_argument("--name")
    p.add_argument("--email")
    p.add_argument("--role", choices=ROLES)
    p.add_argument("--department", type=_department_ref, help="department id, or 'none' to clear")
    active = p.add_mutually_exclusive_group()
    active.add_argument("--active", dest="active", action="store_true", default=None)
    active.add_argument("--inactive", dest="active", action="store_false")
    p.set_defaults(handler=cmd_users_update)

    p = users.add_parser("reset-password")
    p.add_argument("id", type=int)
    p.add_argument("--password", help="omit to be prompted")
    p.set_defaults(handler=cmd_users_reset_password)

    return parser


def main(argv: list[str] | None = None, client: ConsoleClient | None = None, out: TextIO | None = None) -> int:
    out = out or sys.stdout
    args = build_parser().parse_args(argv)
    handler: Callable[[ConsoleClient, argparse.Namespace, TextIO], int] = args.handler

    if client is None:
        config = ClientSettings()
        client = ConsoleClient(args.url or config.URL, SessionHolder(config.TOKEN_FILE))

    with client:
        try:
            return handler(client, args, out)
        except AuthenticationRequired as e:
            out.write(f"{e.message}. Please log in again.\n")
            return 2
        except AccessDenied as e:
            out.write(f"Access denied: {e.message}\n")
            return 3
        except ValidationFailed as e:
            out.write(f"Error: {e.message}\n")
            return 4
        except ApiUnreachable as e:
            out.write(f"Error: {e.message}\n")
            return 5
        except ApiError as e:
            out.write(f"Error ({e.status_code}): {e.message}\n")
            return 5


if __name__ == "__main__":
    sys.exit(main())
