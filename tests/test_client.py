import json
import stat
from decimal import Decimal

import httpx
import pytest

from admin_console.client import (
    AccessDenied, ApiUnreachable, AuthenticationRequired, ConsoleClient, Department, NotFound,
    SessionHolder, ValidationFailed, total_limit,
)
from admin_console.models import RoleName

from tests.conftest import ADMIN_EMAIL, ADMIN_PASSWORD, make_department, make_user

pytestmark = pytest.mark.unit

BASE_URL = "http://testserver/api/v1"


@pytest.fixture
def session(tmp_path) -> SessionHolder:
    return SessionHolder(tmp_path / "session.json")


@pytest.fixture
def console_client(client, session) -> ConsoleClient:
    return ConsoleClient(BASE_URL, session, http=client)


# ─── Session holder ───────────────────────────────────────────────────────────

def test_session_holder_persists_token(tmp_path):
    path = tmp_path / "nested" / "session.json"
    holder = SessionHolder(path)

    holder.set("abc")

    assert json.loads(path.read_text()) == {"accessToken": "abc"}
    assert SessionHolder(path).token == "abc"

    holder.clear()

    assert not path.exists()
    assert SessionHolder(path).token is None


def test_session_file_is_owner_only(tmp_path):
    path = tmp_path / "session.json"
    path.write_text("{}")
    path.chmod(0o644)

    SessionHolder(path).set("abc")

    assert stat.S_IMODE(path.stat().st_mode) == 0o600


def test_session_holder_in_memory():
    holder = SessionHolder()
    holder.set("abc")

    assert holder.is_authenticated
    holder.clear()
    assert not holder.is_authenticated


def test_session_holder_ignores_corrupt_file(tmp_path):
    path = tmp_path / "session.json"
    path.write_text("{not json")

    assert SessionHolder(path).token is None


# ─── Totals ───────────────────────────────────────────────────────────────────

def test_total_limit_sums_decimal_strings():
    departments = [
        Department(1, "IT", "IT", "500.00"),
        Department(2, "Finance", "FIN", "0.10"),
        Department(3, "Legal", "LEG", "0.20"),
    ]

    assert total_limit(departments) == Decimal("500.30")
    assert str(total_limit([])) == "0.00"


# ─── API wrapper ──────────────────────────────────────────────────────────────

def test_login_stores_token_and_identity(console_client, session, admin):
    result = console_client.login(ADMIN_EMAIL, ADMIN_PASSWORD)

    assert session.token == result.accessToken
    assert result.user.is_admin
    assert console_client.me().email == ADMIN_EMAIL


def test_failed_login_leaves_no_session(console_client, session, admin):
    with pytest.raises(AuthenticationRequired) as exc:
        console_client.login(ADMIN_EMAIL, "wrong-password")

    assert exc.value.message == "Invalid credentials"
    assert session.token is None


def test_rejected_token_clears_session(console_client, session):
    session.set("stale-token")

    with pytest.raises(AuthenticationRequired):
        console_client.list_departments()

    assert session.token is None


def test_refresh_hydrates_or_discards(console_client, session, admin):
    assert console_client.refresh() is None

    console_client.login(ADMIN_EMAIL, ADMIN_PASSWORD)
    assert console_client.refresh().role == "ADMIN"

    session.set("garbage")
    assert console_client.refresh() is None
    assert session.token is None


def test_logout_clears_session(console_client, session, admin):
    console_client.login(ADMIN_EMAIL, ADMIN_PASSWORD)

    console_client.logout()

    assert session.token is None
    assert console_client.user is None


def test_department_workflow(console_client, admin):
    console_client.login(ADMIN_EMAIL, ADMIN_PASSWORD)

    dept = console_client.create_department("Information Technology", " it ", Decimal("10"))
    assert dept.code == "IT"
    assert dept.limitUsd == "10.00"

    dept = console_client.update_department(dept.id, name="IT Services")
    assert dept.name == "IT Services"

    dept = console_client.update_department_limit(dept.id, Decimal("500"))
    assert console_client.get_department(dept.id).limitUsd == "500.00"
    assert [d.code for d in console_client.list_departments()] == ["IT"]


def test_validation_error_keeps_session(console_client, session, admin):
    console_client.login(ADMIN_EMAIL, ADMIN_PASSWORD)
    console_client.create_department("IT", "IT")

    with pytest.raises(ValidationFailed) as exc:
        console_client.create_department("Other", "it")

    assert exc.value.field == "code"
    assert session.token is not None


def test_not_found(console_client, admin):
    console_client.login(ADMIN_EMAIL, ADMIN_PASSWORD)

    with pytest.raises(NotFound):
        console_client.get_user(999)


def test_viewer_is_denied_user_management(console_client, session, db):
    make_user(db, "viewer@x.io", RoleName.VIEWER, password="viewer123")
    console_client.login("viewer@x.io", "viewer123")

    with pytest.raises(AccessDenied):
        console_client.list_users()

    assert session.token is not None


def test_user_workflow(console_client, db, admin):
    dept = make_department(db, "IT", "IT")
    console_client.login(ADMIN_EMAIL, ADMIN_PASSWORD)

    user = console_client.create_user("Olga", "olga@x.io", "olga1234", "OFFICER", department_id=dept.id)
    assert user.departmentId == dept.id

    user = console_client.update_user(user.id, role="VIEWER", department_id=None)
    assert user.role == "VIEWER"
    assert user.department is None

    user = console_client.update_user(user.id, is_active=False)
    assert user.isActive is False
    assert user.role == "VIEWER"

    console_client.reset_user_password(user.id, "fresh-pass")
    assert [u.email for u in console_client.list_users()] == [ADMIN_EMAIL, "olga@x.io"]


def _refusing_transport(request: httpx.Request) -> httpx.Response:
    raise httpx.ConnectError("Connection refused", request=request)


def test_unreachable_api_raises_api_error(session):
    http = httpx.Client(transport=httpx.MockTransport(_refusing_transport))
    console = ConsoleClient(BASE_URL, session, http=http)
    session.set("kept-token")

    with pytest.raises(ApiUnreachable) as exc:
        console.list_departments()

    assert exc.value.status_code == 0
    assert "Cannot reach" in exc.value.message
    assert session.token == "kept-token"
