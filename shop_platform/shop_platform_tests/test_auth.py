import jwt
import pytest

from shop_platform.shop_service.auth import (
    create_access_token,
    decode_access_token,
    extract_token,
    hash_password,
    verify_password,
)

from .factories import make_product, make_user


def test_password_hash_never_stores_plaintext():
    hashed = hash_password("goodpassword")
    assert "goodpassword" not in hashed
    assert verify_password("goodpassword", hashed)
    assert not verify_password("wrongpassword", hashed)


def test_same_password_hashes_differently():
    assert hash_password("goodpassword") != hash_password("goodpassword")


def test_verify_password_with_missing_values():
    assert not verify_password("", hash_password("x"))
    assert not verify_password("x", None)


def test_token_carries_user_id_and_email(db):
    user = make_user(db, email="token@example.com")
    payload = decode_access_token(create_access_token(user))
    assert payload["sub"] == str(user.id)
    assert payload["email"] == "token@example.com"
    assert "exp" in payload


def test_expired_token_is_rejected(db):
    user = make_user(db)
    token = create_access_token(user, expires_minutes=-1)
    with pytest.raises(jwt.ExpiredSignatureError):
        decode_access_token(token)


@pytest.mark.parametrize("header,expected", [
    (None, None),
    ("", None),
    ("abc", "abc"),
    ("Bearer abc", "abc"),
    ("bearer abc", "abc"),
    ("Bearer ", None),
])
def test_extract_token(header, expected):
    assert extract_token(header) == expected


def test_create_token_with_valid_credentials(client, db):
    user = make_user(db, email="buyer@example.com", password="testing12345")
    response = client.post("/tokens", json={"email": "buyer@example.com", "password": "testing12345"})
    assert response.status_code == 200
    assert decode_access_token(response.json()["token"])["sub"] == str(user.id)


def test_create_token_with_wrong_password(client, db):
    make_user(db, email="buyer@example.com", password="testing12345")
    response = client.post("/tokens", json={"email": "buyer@example.com", "password": "nope"})
    assert response.status_code == 400


def test_create_token_for_unknown_email(client):
    response = client.post("/tokens", json={"email": "ghost@example.com", "password": "nope"})
    assert response.status_code == 400


def test_protected_route_without_header_is_forbidden(client):
    assert client.get("/orders").status_code == 403


def test_protected_route_with_garbage_token_is_forbidden(client):
    assert client.get("/orders", headers={"Authorization": "Bearer not-a-token"}).status_code == 403


def test_protected_route_with_expired_token_is_forbidden(client, db):
    user = make_user(db)
    token = create_access_token(user, expires_minutes=-1)
    assert client.get("/orders", headers={"Authorization": token}).status_code == 403


def test_token_for_deleted_user_is_forbidden(client, db):
    user = make_user(db)
    token = create_access_token(user)
    db.delete(user)
    db.commit()
    assert client.get("/orders", headers={"Authorization": token}).status_code == 403


def test_raw_token_header_is_accepted(client, db):
    user = make_user(db)
    make_product(db, user)
    response = client.get(f"/users/{user.id}", headers={"Authorization": create_access_token(user)})
    assert response.status_code == 200
    assert len(response.json()["products"]) == 1
