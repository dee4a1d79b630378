from shop_platform.shop_service.auth import verify_password
from shop_platform.shop_service.models import Order, Product, User
from shop_platform.shop_service.repositories import PlacementRepository, UserRepository

from .factories import auth_header_for, make_product, make_user


def test_signup_then_login(client, db):
    created = client.post("/users", json={"email": "new@example.com", "password": "testing12345"})
    assert created.status_code == 201
    assert created.json()["email"] == "new@example.com"
    assert "password" not in created.json()

    stored = db.query(User).filter(User.email == "new@example.com").one()
    assert stored.hashed_password != "testing12345"

    login = client.post("/tokens", json={"email": "new@example.com", "password": "testing12345"})
    assert login.status_code == 200
    assert login.json()["token"]


def test_signup_missing_fields(client):
    response = client.post("/users", json={"email": "new@example.com"})
    assert response.status_code == 400
    assert "body.password" in response.json()["errors"]


def test_signup_invalid_email(client):
    response = client.post("/users", json={"email": "not-an-email", "password": "x"})
    assert response.status_code == 400
    assert "email" in response.json()["errors"]


def test_signup_duplicate_email(client, db):
    make_user(db, email="taken@example.com")
    response = client.post("/users", json={"email": "taken@example.com", "password": "x"})
    assert response.status_code == 400


def test_signup_duplicate_email_registered_concurrently(client, db, monkeypatch):
    make_user(db, email="taken@example.com")
    # The lookup misses, so the unique index is what catches the duplicate
    monkeypatch.setattr(UserRepository, "get_by_email", lambda self, email: None)

    response = client.post("/users", json={"email": "taken@example.com", "password": "x"})
    assert response.status_code == 400
    assert "email" in response.json()["errors"]
    assert db.query(User).filter(User.email == "taken@example.com").count() == 1


def test_show_self(client, db):
    user = make_user(db)
    response = client.get(f"/users/{user.id}", headers=auth_header_for(user))
    assert response.status_code == 200
    assert response.json()["id"] == user.id


def test_show_other_user_is_forbidden(client, db):
    user = make_user(db)
    stranger = make_user(db)
    assert client.get(f"/users/{user.id}", headers=auth_header_for(stranger)).status_code == 403


def test_show_without_auth_is_forbidden(client, db):
    user = make_user(db)
    assert client.get(f"/users/{user.id}").status_code == 403


def test_update_self(client, db):
    user = make_user(db)
    response = client.put(
        f"/users/{user.id}",
        headers=auth_header_for(user),
        json={"email": "renamed@example.com", "password": "newpassword"},
    )
    assert response.status_code == 204

    db.expire_all()
    stored = db.get(User, user.id)
    assert stored.email == "renamed@example.com"
    assert verify_password("newpassword", stored.hashed_password)


def test_update_with_invalid_email(client, db):
    user = make_user(db, email="keep@example.com")
    response = client.put(f"/users/{user.id}", headers=auth_header_for(user), json={"email": "broken"})
    assert response.status_code == 400

    db.expire_all()
    assert db.get(User, user.id).email == "keep@example.com"


def test_update_other_user_is_forbidden(client, db):
    user = make_user(db)
    stranger = make_user(db)
    response = client.put(f"/users/{user.id}", headers=auth_header_for(stranger), json={"email": "x@example.com"})
    assert response.status_code == 403


def test_delete_self_removes_products_and_orders(client, db):
    seller = make_user(db)
    user = make_user(db)
    stock = make_product(db, seller, quantity=10)
    make_product(db, user)
    headers = auth_header_for(user)

    assert client.post("/orders", headers=headers, json={"products": [{"id": stock.id, "quantity": 4}]}).status_code == 201
    user_id = user.id

    response = client.delete(f"/users/{user_id}", headers=headers)
    assert response.status_code == 204

    db.expire_all()
    assert db.get(User, user_id) is None
    assert db.query(Product).filter(Product.user_id == user_id).count() == 0
    assert db.query(Order).filter(Order.user_id == user_id).count() == 0
    assert db.get(Product, stock.id).quantity == 10


def test_delete_user_whose_products_are_ordered_by_others(client, db):
    seller = make_user(db)
    buyer = make_user(db)
    product = make_product(db, seller, quantity=10)

    ordered = client.post("/orders", headers=auth_header_for(buyer), json={"products": [{"id": product.id, "quantity": 1}]})
    assert ordered.status_code == 201

    response = client.delete(f"/users/{seller.id}", headers=auth_header_for(seller))
    assert response.status_code == 409


def test_delete_other_user_is_forbidden(client, db):
    user = make_user(db)
    stranger = make_user(db)
    assert client.delete(f"/users/{user.id}", headers=auth_header_for(stranger)).status_code == 403
    db.expire_all()
    assert db.get(User, user.id) is not None


def test_delete_user_whose_products_were_ordered_after_the_check(client, db, monkeypatch):
    seller = make_user(db)
    buyer = make_user(db)
    product = make_product(db, seller, quantity=10)
    ordered = client.post("/orders", headers=auth_header_for(buyer), json={"products": [{"id": product.id, "quantity": 1}]})
    assert ordered.status_code == 201

    monkeypatch.setattr(PlacementRepository, "count_for_products", lambda self, *args, **kwargs: 0)
    response = client.delete(f"/users/{seller.id}", headers=auth_header_for(seller))
    assert response.status_code == 409

    db.expire_all()
    assert db.get(User, seller.id) is not None
    assert db.get(Product, product.id) is not None
