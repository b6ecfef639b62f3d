import io

import httpx
import pytest

from admin_console.client import ConsoleClient, SessionHolder
from admin_console.client.console import build_parser, main
from admin_console.models import RoleName

from tests.conftest import ADMIN_EMAIL, ADMIN_PASSWORD, make_department, make_user

pytestmark = pytest.mark.unit


@pytest.fixture
def run(client, tmp_path):
    session = SessionHolder(tmp_path / "session.json")

    def _run(*argv):
        out = io.StringIO()
        code = main(list(argv), client=ConsoleClient("http://testserver/api/v1", session, http=client), out=out)
        return code, out.getvalue()

    _run.session = session
    return _run


def test_login_shows_admin_dashboard(run, admin):
    code, output = run("login", ADMIN_EMAIL, "--password", ADMIN_PASSWORD)

    assert code == 0
    assert "Admin Dashboard" in output
    assert f"Logged in as: {ADMIN_EMAIL}" in output
    assert run.session.token is not None


def test_login_failure_reports_and_exits(run, admin):
    code, output = run("login", ADMIN_EMAIL, "--password", "bad-password")

    assert code == 2
    assert "Invalid credentials" in output


def test_whoami_without_session(run):
    code, output = run("whoami")

    assert code == 1
    assert "Not logged in" in output


def test_viewer_landing(run, db):
    dept = make_department(db, "IT", "IT")
    make_user(db, "viewer@x.io", RoleName.VIEWER, password="viewer123", department=dept)

    code, output = run("login", "viewer@x.io", "--password", "viewer123")

    assert code == 0
    assert "Admin Dashboard" not in output
    assert f"VIEWER, department #{dept.id}" in output


def test_departments_screen_shows_total(run, db, admin):
    make_department(db, "IT", "IT", "500")
    make_department(db, "Finance", "FIN", "250.25")
    run("login", ADMIN_EMAIL, "--password", ADMIN_PASSWORD)

    code, output = run("departments", "list")

    assert code == 0
    assert "$500.00" in output
    assert "Total allocated limit (all departments): $750.25" in output


def test_department_commands(run, admin):
    run("login", ADMIN_EMAIL, "--password", ADMIN_PASSWORD)

    code, output = run("departments", "create", "Legal", "leg", "--limit", "20")
    assert code == 0
    assert "LEG Legal limit=$20.00" in output

    code, output = run("departments", "set-limit", "1", "99.5")
    assert "limit=$99.50" in output

    code, output = run("departments", "rename", "1", "--name", "Legal Affairs")
    assert "Legal Affairs" in output


def test_validation_error_is_shown_inline(run, admin):
    run("login", ADMIN_EMAIL, "--password", ADMIN_PASSWORD)
    run("departments", "create", "Legal", "LEG")

    code, output = run("departments", "create", "Other", "leg")

    assert code == 4
    assert "Error: Department code already exists" in output
    assert run.session.token is not None


def test_user_commands(run, db, admin):
    dept = make_department(db, "IT", "IT")
    run("login", ADMIN_EMAIL, "--password", ADMIN_PASSWORD)

    code, output = run("users", "create", "Olga", "olga@x.io", "OFFICER", "--password", "olga1234")
    assert code == 4
    assert "OFFICER must have a departmentId" in output

    code, output = run(
        "users", "create", "Olga", "olga@x.io", "OFFICER", "--department", str(dept.id), "--password", "olga1234",
    )
    assert code == 0
    assert "department=IT" in output

    code, output = run("users", "update", "2", "--department", "none")
    assert code == 4
    assert "OFFICER must have a department" in output

    code, output = run("users", "update", "2", "--inactive")
    assert "active=no" in output

    code, output = run("users", "list")
    assert "olga@x.io" in output

    code, output = run("users", "reset-password", "2", "--password", "newpass1")
    assert "Password reset for olga@x.io" in output


def test_access_denied_for_viewer(run, db):
    make_user(db, "viewer@x.io", RoleName.VIEWER, password="viewer123")
    run("login", "viewer@x.io", "--password", "viewer123")

    code, output = run("users", "list")

    assert code == 3
    assert output.startswith("Access denied")
    assert run.session.token is not None


def test_logout_then_protected_call(run, admin):
    run("login", ADMIN_EMAIL, "--password", ADMIN_PASSWORD)
    run("logout")

    code, output = run("departments", "list")

    assert code == 2
    assert "Please log in again" in output


def test_update_department_flag_parsing():
    parser = build_parser()

    assert parser.parse_args(["users", "update", "3", "--department", "None"]).department == "None"
    assert parser.parse_args(["users", "update", "3"]).active is None
    assert parser.parse_args(["users", "update", "3", "--active"]).active is True
    with pytest.raises(SystemExit):
        parser.parse_args(["users", "update", "3", "--department", "abc"])


def test_unreachable_api_reports_and_exits():
    def refuse(request):
        raise httpx.ConnectError("Connection refused", request=request)

    http = httpx.Client(transport=httpx.MockTransport(refuse))
    out = io.StringIO()

    code = main(
        ["login", ADMIN_EMAIL, "--password", ADMIN_PASSWORD],
        client=ConsoleClient("http://127.0.0.1:9/api/v1", SessionHolder(), http=http),
        out=out,
    )

    assert code == 5
    assert "Cannot reach the admin console API" in out.getvalue()
