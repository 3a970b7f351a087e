import pytest

from app.bizdash import create_app
from app.bizdash.models import Base
from app.bizdash.modules.customers.repository import InMemoryCustomerRepository
from app.bizdash.modules.customers.schemas import CustomerCreate


def _make_app(tmp_path, monkeypatch, env=None, **kwargs):
    monkeypatch.setenv("SECRET_KEY", "test-secret")
    monkeypatch.setenv("DATABASE_URL", f"sqlite:///{tmp_path/'test.db'}")
    monkeypatch.setenv("ENV", "test")
    for k in ("API_PREFIX", "DEFAULT_PAGE_SIZE", "LOG_LEVEL"):
        monkeypatch.delenv(k, raising=False)
    for k, v in (env or {}).items():
        monkeypatch.setenv(k, v)

    app = create_app(**kwargs)
    Base.metadata.create_all(bind=app.extensions["sqlalchemy_engine"])
    return app


@pytest.fixture()
def app(tmp_path, monkeypatch):
    return _make_app(tmp_path, monkeypatch)


@pytest.fixture()
def client(app):
    return app.test_client()


def _seed_customers(app, n):
    service = app.extensions["customer_service"]
    for i in range(1, n + 1):
        service.create_customer(
            CustomerCreate(
                company_name=f"Company {i:02d}",
                contact_name=f"Contact {i:02d}",
                email=f"contact{i:02d}@example.com",
            )
        )


def test_customer_lifecycle(client):
    r = client.post(
        "/api/customers",
        json={"companyName": "Acme", "contactName": "John Smith", "email": "JOHN@ACME.COM", "phone": "555-0100"},
    )
    assert r.status_code == 201
    assert r.json["message"] == "Customer created successfully"
    created = r.json["data"]
    assert created["email"] == "john@acme.com"
    assert created["phone"] == "555-0100"
    assert created["createdAt"] == created["updatedAt"]
    cid = created["id"]

    r = client.post(
        "/api/customers",
        json={"companyName": "Other", "contactName": "Someone", "email": "john@acme.com"},
    )
    assert r.status_code == 409
    assert r.json["error"] == "Email already exists"
    assert r.json["details"][0]["path"] == ["email"]

    r = client.put(f"/api/customers/{cid}", json={"contactName": "Jane Smith"})
    assert r.status_code == 200
    assert r.json["message"] == "Customer updated successfully"
    assert r.json["data"]["companyName"] == "Acme"
    assert r.json["data"]["contactName"] == "Jane Smith"
    assert r.json["data"]["updatedAt"] > created["updatedAt"]

    r = client.get(f"/api/customers/{cid}")
    assert r.status_code == 200
    assert r.json["data"]["contactName"] == "Jane Smith"

    r = client.delete(f"/api/customers/{cid}")
    assert r.status_code == 200
    assert r.json["message"] == "Customer deleted successfully"

    r = client.delete(f"/api/customers/{cid}")
    assert r.status_code == 404
    assert r.json["error"] == "Customer not found"

    r = client.get(f"/api/customers/{cid}")
    assert r.status_code == 404


def test_list_second_page(app, client):
    _seed_customers(app, 25)
    r = client.get("/api/customers?page=2&limit=20")
    assert r.status_code == 200
    assert len(r.json["data"]) == 5
    assert r.json["pagination"] == {"page": 2, "limit": 20, "total": 25, "pages": 2}


def test_list_defaults_and_blank_params(app, client):
    _seed_customers(app, 3)
    r = client.get("/api/customers?page=&limit=&sort=&order=&search=")
    assert r.status_code == 200
    assert r.json["pagination"] == {"page": 1, "limit": 20, "total": 3, "pages": 1}
    assert [c["companyName"] for c in r.json["data"]] == ["Company 01", "Company 02", "Company 03"]


def test_list_search_and_sort(app, client):
    _seed_customers(app, 12)
    r = client.get("/api/customers", query_string={"search": "company 1", "sort": "companyName", "order": "desc"})
    assert r.status_code == 200
    assert [c["companyName"] for c in r.json["data"]] == ["Company 12", "Company 11", "Company 10"]
    assert r.json["pagination"]["total"] == 3


def test_default_page_size_from_env(tmp_path, monkeypatch):
    app = _make_app(tmp_path, monkeypatch, env={"DEFAULT_PAGE_SIZE": "5"})
    _seed_customers(app, 7)
    r = app.test_client().get("/api/customers")
    assert r.json["pagination"]["limit"] == 5
    assert r.json["pagination"]["pages"] == 2


@pytest.mark.parametrize(
    "query, field",
    [
        ("page=0", "page"),
        ("page=abc", "page"),
        ("limit=101", "limit"),
        ("limit=0", "limit"),
        ("sort=email", "sort"),
        ("order=up", "order"),
    ],
)
def test_list_rejects_bad_query(client, query, field):
    r = client.get(f"/api/customers?{query}")
    assert r.status_code == 400
    assert r.json["error"] == "Invalid query parameters"
    assert [d["path"] for d in r.json["details"]] == [[field]]


def test_create_reports_every_invalid_field(client):
    r = client.post("/api/customers", json={"phone": "x" * 21})
    assert r.status_code == 400
    assert r.json["error"] == "Validation error"
    paths = [d["path"] for d in r.json["details"]]
    assert paths == [["companyName"], ["contactName"], ["email"], ["phone"]]


def test_create_rejects_non_object_body(client):
    r = client.post("/api/customers", data="oops", content_type="text/plain")
    assert r.status_code == 400
    assert r.json["error"] == "Request body must be a JSON object"

    r = client.post("/api/customers", json=["not", "an", "object"])
    assert r.status_code == 400


def test_create_trims_and_clears_blank_phone(client):
    r = client.post(
        "/api/customers",
        json={"companyName": "  Acme  ", "contactName": " John ", "email": " a@b.io ", "phone": "   ", "extra": 1},
    )
    assert r.status_code == 201
    data = r.json["data"]
    assert data["companyName"] == "Acme"
    assert data["contactName"] == "John"
    assert data["email"] == "a@b.io"
    assert data["phone"] is None
    assert "extra" not in data


def test_non_numeric_id_is_bad_request(client):
    for method in ("get", "put", "delete"):
        r = getattr(client, method)("/api/customers/abc", json={})
        assert r.status_code == 400
        assert r.json["error"] == "Invalid customer ID"


def test_update_missing_customer(client):
    r = client.put("/api/customers/999", json={"contactName": "Nobody"})
    assert r.status_code == 404
    assert r.json == {"error": "Customer not found"}


def test_update_email_conflict_and_own_email(app, client):
    _seed_customers(app, 2)
    r = client.put("/api/customers/1", json={"email": "CONTACT02@example.com"})
    assert r.status_code == 409

    r = client.put("/api/customers/1", json={"email": "  CONTACT01@Example.com "})
    assert r.status_code == 200
    assert r.json["data"]["email"] == "contact01@example.com"


def test_update_validation_and_phone_clear(app, client):
    _seed_customers(app, 1)
    client.put("/api/customers/1", json={"phone": "555-0199"})

    r = client.put("/api/customers/1", json={"companyName": "   "})
    assert r.status_code == 400
    assert r.json["details"][0]["path"] == ["companyName"]

    r = client.put("/api/customers/1", json={"phone": None})
    assert r.status_code == 200
    assert r.json["data"]["phone"] is None
    assert r.json["data"]["companyName"] == "Company 01"


class _ExplodingRepository(InMemoryCustomerRepository):
    def find_all(self, filters):
        raise RuntimeError("storage is on fire")


def test_unexpected_fault_is_opaque_500(tmp_path, monkeypatch):
    app = _make_app(tmp_path, monkeypatch, customer_repository=_ExplodingRepository())
    r = app.test_client().get("/api/customers")
    assert r.status_code == 500
    assert r.json == {"error": "Internal server error"}
    assert b"fire" not in r.data


def test_injected_repository_is_used(tmp_path, monkeypatch):
    repo = InMemoryCustomerRepository()
    app = _make_app(tmp_path, monkeypatch, customer_repository=repo)
    client = app.test_client()
    r = client.post("/api/customers", json={"companyName": "Acme", "contactName": "J", "email": "j@acme.com"})
    assert r.status_code == 201
    assert repo.find_by_email("j@acme.com") is not None
    assert app.extensions["customer_service"].repository is repo


def test_page_far_past_the_end_is_empty(app, client):
    _seed_customers(app, 3)
    for page in ("4", "100000000000000000000", "9" * 400):
        r = client.get(f"/api/customers?page={page}&limit=100")
        assert r.status_code == 200
        assert r.json["data"] == []
        assert r.json["pagination"]["total"] == 3
        assert r.json["pagination"]["page"] == int(page)


@pytest.mark.parametrize("cid", ["100000000000000000000", str(2**63), "0", "-1"])
def test_out_of_range_id_is_not_found(app, client, cid):
    _seed_customers(app, 1)
    assert client.get(f"/api/customers/{cid}").status_code == 404
    assert client.put(f"/api/customers/{cid}", json={"contactName": "x"}).status_code == 404
    assert client.delete(f"/api/customers/{cid}").status_code == 404


@pytest.mark.parametrize("cid", ["0_1", "+1", "1.0", "١"])
def test_only_plain_digits_are_ids(app, client, cid):
    _seed_customers(app, 1)
    r = client.get(f"/api/customers/{cid}")
    assert r.status_code == 400
    assert r.json["error"] == "Invalid customer ID"
