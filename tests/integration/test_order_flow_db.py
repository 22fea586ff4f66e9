from __future__ import annotations

import concurrent.futures

from fastapi.testclient import TestClient

from tableflow.api.main import app


def _order_body(table_id: str = "tbl_001") -> dict:
    return {
        "items": [
            {
                "productId": "prd_001",
                "quantity": 2,
                "customizations": {"adicionaisIds": ["add_001"]},
            }
        ],
        "tableId": table_id,
        "staffUserId": "usr_001",
    }


def test_order_flow_is_persisted() -> None:
    with TestClient(app) as client:
        select_response = client.post(
            "/v1/tables/tbl_001/select", json={"staffUserId": "usr_001"}
        )
        assert select_response.status_code == 200

        create_response = client.post("/v1/orders", json=_order_body())
        assert create_response.status_code == 201
        order_id = create_response.json()["orderId"]
        assert create_response.json()["total"]["amountCents"] == 6680

        add_response = client.post(
            "/v1/tables/tbl_001/products",
            json={"products": [{"productId": "prd_003", "quantity": 1, "price": "9.90"}]},
        )
        assert add_response.status_code == 200
        assert add_response.json()["total"]["amountCents"] == 7670

        pay_response = client.post(
            f"/v1/orders/{order_id}/payment", json={"paymentMethod": "PIX"}
        )
        assert pay_response.status_code == 200
        assert client.get("/v1/tables/tbl_001/state").json()["status"] == "OCCUPIED"

        receive_response = client.post(f"/v1/orders/{order_id}/receive")
        assert receive_response.status_code == 200

        get_response = client.get(f"/v1/orders/{order_id}")
        assert get_response.status_code == 200
        assert get_response.json()["status"] == "DELIVERED"
        assert get_response.json()["isActive"] is False
        assert client.get("/v1/tables/tbl_001/state").json()["status"] == "FREE"


def test_concurrent_create_order_keeps_one_active_order() -> None:
    client = TestClient(app)

    def _create_once(_: int) -> int:
        return client.post("/v1/orders", json=_order_body("tbl_002")).status_code

    with concurrent.futures.ThreadPoolExecutor(max_workers=4) as executor:
        results = list(executor.map(_create_once, range(4)))

    assert results.count(201) == 1
    assert results.count(409) == 3

    state = client.get("/v1/tables/tbl_002/state").json()
    assert len(state["activeOrders"]) == 1
