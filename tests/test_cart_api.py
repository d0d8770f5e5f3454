"""Cart endpoints via TestClient, backed by the in-memory store."""

import uuid

from tests.conftest import product_row

CART = "/api/v1/cart"


def _seed_product(store, **kwargs):
    return store.seed("products", product_row(**kwargs))


def _add(client, product_id, quantity=1):
    return client.post(CART, json={"product_id": product_id, "quantity": quantity})


class TestCartSession:
    def test_new_session_id_is_issued(self, client):
        response = client.get(CART)
        assert response.status_code == 200
        assert response.headers["X-Cart-Session"]
        assert response.json() == {"items": [], "total_items": 0, "total_amount": "0.00"}

    def test_sessions_do_not_share_carts(self, client, store):
        product = _seed_product(store)
        _add(client, product["id"], 1).raise_for_status()

        other = client.get(CART, headers={"X-Cart-Session": "someone-else"})
        assert other.json()["items"] == []

    def test_session_id_is_echoed(self, client):
        response = client.get(CART, headers={"X-Cart-Session": "abc123"})
        assert response.headers["X-Cart-Session"] == "abc123"

    def test_reads_do_not_register_sessions(self, client):
        sessions = client.app.state.cart_sessions
        for _ in range(5):
            client.get(CART)
        client.delete(CART)
        client.patch(f"{CART}/{uuid.uuid4()}", json={"quantity": 2})

        assert len(sessions) == 0

    def test_adding_registers_the_session(self, client, store):
        product = _seed_product(store)
        response = _add(client, product["id"])

        session_id = response.headers["X-Cart-Session"]
        assert len(client.app.state.cart_sessions) == 1
        assert client.get(CART, headers={"X-Cart-Session": session_id}).json()["total_items"] == 1


class TestAddToCart:
    def test_add_and_increment(self, cart_client, store):
        product = _seed_product(store, price="50.00")

        _add(cart_client, product["id"], 1)
        body = _add(cart_client, product["id"], 2).json()

        assert len(body["items"]) == 1
        assert body["items"][0]["quantity"] == 3
        assert body["total_items"] == 3
        assert body["total_amount"] == "150.00"

    def test_sale_price_applies(self, cart_client, store):
        table = _seed_product(store, price="10.00")
        bench = _seed_product(store, price="25.00", sale_price="20.00")

        _add(cart_client, table["id"], 2)
        body = _add(cart_client, bench["id"], 1).json()

        assert body["total_amount"] == "40.00"
        assert [i["unit_price"] for i in body["items"]] == ["10.00", "20.00"]

    def test_unknown_product(self, cart_client):
        response = _add(cart_client, str(uuid.uuid4()))
        assert response.status_code == 404
        assert response.json()["detail"] == "Product not found"

    def test_out_of_stock_product(self, cart_client, store):
        product = _seed_product(store, in_stock=False)
        assert _add(cart_client, product["id"]).status_code == 400

    def test_quantity_capped_by_stock(self, cart_client, store):
        product = _seed_product(store, stock=3)
        _add(cart_client, product["id"], 2).raise_for_status()

        response = _add(cart_client, product["id"], 2)
        assert response.status_code == 400
        assert cart_client.get(CART).json()["items"][0]["quantity"] == 2

    def test_non_positive_quantity_is_rejected_by_schema(self, cart_client, store):
        product = _seed_product(store)
        assert _add(cart_client, product["id"], 0).status_code == 422

    def test_catalog_outage(self, cart_client, store):
        store.fail_on.add(("select", "products"))
        response = _add(cart_client, str(uuid.uuid4()))
        assert response.status_code == 503


class TestUpdateRemoveClear:
    def test_update_quantity(self, cart_client, store):
        product = _seed_product(store)
        _add(cart_client, product["id"], 1)

        body = cart_client.patch(f"{CART}/{product['id']}", json={"quantity": 4}).json()
        assert body["items"][0]["quantity"] == 4

    def test_update_above_stock(self, cart_client, store):
        product = _seed_product(store, stock=2)
        _add(cart_client, product["id"], 1)

        response = cart_client.patch(f"{CART}/{product['id']}", json={"quantity": 5})
        assert response.status_code == 400

    def test_update_to_zero_removes(self, cart_client, store):
        product = _seed_product(store)
        _add(cart_client, product["id"], 2)

        body = cart_client.patch(f"{CART}/{product['id']}", json={"quantity": 0}).json()
        assert body["items"] == []

    def test_decrease_does_not_hit_catalog(self, cart_client, store):
        product = _seed_product(store)
        _add(cart_client, product["id"], 3)
        store.fail_on.add(("select", "products"))

        response = cart_client.patch(f"{CART}/{product['id']}", json={"quantity": 1})
        assert response.status_code == 200

    def test_update_unknown_line_is_a_no_op(self, cart_client, store):
        product = _seed_product(store)
        before = _add(cart_client, product["id"], 1).json()

        response = cart_client.patch(f"{CART}/{uuid.uuid4()}", json={"quantity": 3})
        assert response.status_code == 200
        assert response.json() == before

    def test_remove_line(self, cart_client, store):
        keep, drop = _seed_product(store), _seed_product(store)
        _add(cart_client, keep["id"])
        _add(cart_client, drop["id"])

        body = cart_client.delete(f"{CART}/{drop['id']}").json()
        assert [i["product_id"] for i in body["items"]] == [keep["id"]]

    def test_remove_unknown_line_is_a_no_op(self, cart_client):
        response = cart_client.delete(f"{CART}/{uuid.uuid4()}")
        assert response.status_code == 200

    def test_clear(self, cart_client, store):
        _add(cart_client, _seed_product(store)["id"], 2)

        body = cart_client.delete(CART).json()
        assert body == {"items": [], "total_items": 0, "total_amount": "0.00"}
