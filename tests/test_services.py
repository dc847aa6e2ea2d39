import pytest

from storefront import services
from storefront.exceptions import DuplicateUsername, InvalidCredentials, StorageError
from storefront.models.user import User


@pytest.fixture(autouse=True)
def _db(session_local, fast_hashing):
    return session_local


def test_register_stores_hash_not_plaintext(session_local):
    user = services.register_user("alice", "pw123", "merchant")
    session = session_local()
    stored = session.get(User, user.id)
    session.close()
    assert stored.password_hash != "pw123"
    assert stored.password_hash.startswith("$2")


def test_same_password_gets_distinct_salts(session_local):
    services.register_user("a", "shared", "customer")
    services.register_user("b", "shared", "customer")
    session = session_local()
    hashes = {u.password_hash for u in session.query(User).all()}
    session.close()
    assert len(hashes) == 2


def test_duplicate_username():
    services.register_user("alice", "pw123", "merchant")
    with pytest.raises(DuplicateUsername):
        services.register_user("alice", "different", "customer")


def test_role_outside_enum_fails_insert():
    with pytest.raises(DuplicateUsername):
        services.register_user("mallory", "pw", "admin")


def test_login_round_trip():
    registered = services.register_user("alice", "pw123", "merchant")
    user = services.authenticate_user("alice", "pw123")
    assert (user.id, user.role) == (registered.id, registered.role)


def test_login_failures_share_one_error():
    services.register_user("alice", "pw123", "merchant")
    with pytest.raises(InvalidCredentials) as wrong:
        services.authenticate_user("alice", "nope")
    with pytest.raises(InvalidCredentials) as unknown:
        services.authenticate_user("zed", "pw123")
    assert wrong.value.message == unknown.value.message == "Invalid credentials"


def test_list_after_creates_round_trips_fields():
    rows = [
        ("Mug", "A mug", 9.99, "", 1),
        ("Plate", "Flat", 12.5, "https://img.example/plate.png", 2),
        ("Spoon", "", 0.01, None, 1),
    ]
    for row in rows:
        services.create_product(*row)

    products = services.list_products()
    assert len(products) == len(rows)
    for product, (name, description, price, image_url, merchant_id) in zip(products, rows):
        assert product.name == name
        assert product.description == description
        assert round(product.price, 2) == price
        assert product.image_url == image_url
        assert product.merchant_id == merchant_id


def test_create_product_accepts_orphan_merchant():
    # merchant_id is not validated against users; kept as a known gap
    product = services.create_product("Ghost", "", 1.0, None, 999)
    assert product.id == 1
    assert services.list_products()[0].merchant_id == 999


def test_get_user_missing_returns_none():
    assert services.get_user(42) is None


def test_storage_failures_become_storage_error(monkeypatch):
    from sqlalchemy.exc import OperationalError

    def broken(self):
        raise OperationalError("SELECT", {}, Exception("disk I/O error"))

    monkeypatch.setattr("storefront.stores.ProductStore.list_all", broken)
    with pytest.raises(StorageError):
        services.list_products()
