import pytest
from starlette.testclient import TestClient

import main
from conftest import ADMIN_EMAIL, PASSWORD, USER_EMAIL


@pytest.fixture
def client(use_fake_db):
    return TestClient(main.app)


def login(client, email=ADMIN_EMAIL, password=PASSWORD):
    return client.post("/login", data={"email": email, "password": password})


def test_index_renders_login_form(client):
    r = client.get("/")
    assert r.status_code == 200
    assert 'action="/login"' in r.text


def test_wrong_password_shows_inline_error(client):
    r = login(client, password="nope")
    assert r.status_code == 200
    assert "이메일 또는 비밀번호가 틀렸습니다" in r.text
    assert ADMIN_EMAIL in r.text


def test_dashboard_requires_login(client):
    r = client.get("/dashboard", follow_redirects=False)
    assert r.status_code == 303
    assert r.headers["location"] == "/"


def test_admin_dashboard(client):
    r = login(client)
    assert r.status_code == 200
    assert "총 다이아몬드" in r.text
    assert "📤 업로드" in r.text
    assert 'href="/admin"' in r.text
    # 500 + 300 + 100
    assert "900" in r.text
    assert "3명" in r.text


def test_user_dashboard_shows_agency_and_hides_admin_controls(client):
    r = login(client, USER_EMAIL)
    assert r.status_code == 200
    assert "Star" in r.text
    assert "📤 업로드" not in r.text
    assert 'href="/admin"' not in r.text


def test_dashboard_filters_and_creator_tab(client):
    login(client)
    r = client.get("/dashboard", params={"period": "12월2주", "tab": "creators"})
    assert r.status_code == 200
    assert "user_c3" in r.text
    assert "user_c1" not in r.text


def test_unknown_filter_values_fall_back_to_all(client):
    login(client)
    r = client.get("/dashboard", params={"period": "nope", "group": "nope", "tab": "creators"})
    assert "user_c1" in r.text
    assert "user_c3" in r.text


def test_login_page_redirects_when_signed_in(client):
    login(client)
    r = client.get("/", follow_redirects=False)
    assert r.status_code == 303
    assert r.headers["location"] == "/dashboard"


def test_logout_clears_session(client, use_fake_db):
    login(client)
    client.get("/logout")
    assert use_fake_db.auth_server.revoked == ["token-u-admin"]
    r = client.get("/dashboard", follow_redirects=False)
    assert r.status_code == 303


def test_logout_leaves_other_users_signed_in(use_fake_db):
    admin, user = TestClient(main.app), TestClient(main.app)
    login(admin)
    login(user, USER_EMAIL)

    admin.get("/logout")

    assert use_fake_db.auth_server.revoked == ["token-u-admin"]
    assert "Star" in user.get("/dashboard").text


def test_login_keeps_no_session_on_shared_client(client, use_fake_db):
    login(client)
    assert use_fake_db.auth.get_session() is None


def test_expired_session_returns_to_login(client, use_fake_db):
    login(client)
    use_fake_db.auth_server.expire("token-u-admin")
    use_fake_db.auth_server.refresh.clear()

    r = client.get("/dashboard", follow_redirects=False)
    assert r.status_code == 303
    assert r.headers["location"] == "/"

    r = client.get("/", follow_redirects=False)
    assert r.status_code == 200
    assert 'action="/login"' in r.text


def test_expired_access_token_is_refreshed(client, use_fake_db):
    login(client)
    use_fake_db.auth_server.expire("token-u-admin")

    r = client.get("/dashboard")
    assert r.status_code == 200
    assert "총 다이아몬드" in r.text
    assert use_fake_db.tokens[-1] != "token-u-admin"
    assert use_fake_db.tokens[-1].startswith("token-u-admin-")


def test_dashboard_load_failure_offers_logout(client, use_fake_db):
    login(client)
    use_fake_db.fail_on.add(("profiles", "select"))

    r = client.get("/dashboard")
    assert "데이터를 불러오지 못했습니다" in r.text
    assert 'href="/logout"' in r.text

    client.get("/logout")
    assert 'action="/login"' in client.get("/").text

def test_non_admin_redirected_from_admin(client):
    login(client, USER_EMAIL)
    r = client.get("/admin", follow_redirects=False)
    assert r.status_code == 303
    assert r.headers["location"] == "/dashboard"


def test_upload_flow(client, use_fake_db, make_workbook):
    login(client)
    content = make_workbook(
        [
            ["n1", "new1", "A", "kim", "3", "1500000", "0", "5", "", "2"],
            ["n2", "new2", "B", "lee", "90", "abc", "0", "1", "", "1"],
        ]
    )
    r = client.post(
        "/dashboard/upload",
        data={"period": "12월3주", "agency_id": "ag-star"},
        files={"file": ("report.xlsx", content, "application/octet-stream")},
    )
    assert r.status_code == 200
    assert "2개 데이터 업로드 완료!" in r.text

    stored = [r for r in use_fake_db.tables["creator_data"] if r["period"] == "12월3주"]
    assert sorted(r["diamonds"] for r in stored) == [0, 1500000]


def test_upload_of_broken_file_inserts_nothing(client, use_fake_db):
    login(client)
    before = len(use_fake_db.tables["creator_data"])
    r = client.post(
        "/dashboard/upload",
        data={"period": "12월3주", "agency_id": "ag-star"},
        files={"file": ("report.xlsx", b"garbage", "application/octet-stream")},
    )
    assert "업로드 실패" in r.text
    assert len(use_fake_db.tables["creator_data"]) == before


def test_upload_by_non_admin_rejected(client, use_fake_db, make_workbook):
    login(client, USER_EMAIL)
    before = len(use_fake_db.tables["creator_data"])
    client.post(
        "/dashboard/upload",
        data={"period": "12월3주", "agency_id": "ag-star"},
        files={"file": ("report.xlsx", make_workbook([["x"]]), "application/octet-stream")},
    )
    assert len(use_fake_db.tables["creator_data"]) == before


def test_admin_tabs_render(client):
    login(client)
    assert "Nova" in client.get("/admin").text
    assert USER_EMAIL in client.get("/admin", params={"tab": "users"}).text
    assert "12월2주" in client.get("/admin", params={"tab": "data"}).text


def test_create_agency_blank_name_flashes_error(client, use_fake_db):
    login(client)
    r = client.post("/admin/agencies", data={"name": "   "})
    assert "에이전시 이름을 입력하세요" in r.text
    assert len(use_fake_db.tables["agencies"]) == 2


def test_create_agency(client, use_fake_db):
    login(client)
    r = client.post("/admin/agencies", data={"name": " Orbit "})
    assert r.status_code == 200
    assert "Orbit" in [a["name"] for a in use_fake_db.tables["agencies"]]


def test_delete_agency_cascade_failure_reported(client, use_fake_db):
    login(client)
    use_fake_db.fail_on.add(("agencies", "delete"))
    r = client.post("/admin/agencies/ag-nova/delete")
    assert "삭제 실패" in r.text
    assert "committed: creator_data, profiles" in r.text


def test_user_role_and_agency_changes(client, use_fake_db):
    login(client)
    client.post("/admin/users/u-user/role", data={"role": "admin"})
    client.post("/admin/users/u-user/agency", data={"agency_id": ""})
    row = next(p for p in use_fake_db.tables["profiles"] if p["id"] == "u-user")
    assert row["role"] == "admin"
    assert row["agency_id"] is None


def test_unknown_role_rejected(client, use_fake_db):
    login(client)
    r = client.post("/admin/users/u-user/role", data={"role": "owner"})
    assert "알 수 없는 역할입니다" in r.text


def test_delete_batch(client, use_fake_db):
    login(client)
    r = client.post("/admin/batches/delete", data={"period": "12월1주", "agency_id": "ag-star"})
    assert r.status_code == 200
    assert {row["period"] for row in use_fake_db.tables["creator_data"]} == {"12월2주"}
