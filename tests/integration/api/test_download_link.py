from datetime import timedelta
from urllib.parse import parse_qs, urlparse
from uuid import uuid4

import pytest
from httpx import AsyncClient

from src.domain.base import utcnow
from src.domain.entities import OrderStatus
from tests.utils.json_compare import exclude_keys


@pytest.mark.asyncio
async def test_purchased_product_gets_signed_link(client: AsyncClient, seed, auth_headers):
    """
    Given I completed an order containing a product
    When I request a download link
    Then I receive a signed URL bound to my order that expires in 15 minutes
    """
    user_id = await seed.create_user()
    product_id = await seed.create_product("ebook")
    order_id = await seed.create_order(user_id, [product_id])

    response = await client.post(
        f"/products/{product_id}/download-link", headers=auth_headers(user_id)
    )

    assert response.status_code == 200
    data = response.json()
    assert set(data.keys()) == {"url", "token", "expires"}

    parsed = urlparse(data["url"])
    assert parsed.path == f"/products/download/{product_id}"
    query = parse_qs(parsed.query)
    assert query["order"] == [str(order_id)]
    assert query["token"] == [data["token"]]
    assert query["expires"] == [str(data["expires"])]

    remaining_ms = data["expires"] - int(utcnow().timestamp() * 1000)
    assert 14 * 60 * 1000 < remaining_ms <= 15 * 60 * 1000


@pytest.mark.asyncio
async def test_link_binds_latest_completed_order(client: AsyncClient, seed, auth_headers):
    user_id = await seed.create_user()
    product_id = await seed.create_product("ebook")
    await seed.create_order(user_id, [product_id], created_at=utcnow() - timedelta(days=30))
    newest_order_id = await seed.create_order(user_id, [product_id])

    response = await client.post(
        f"/products/{product_id}/download-link", headers=auth_headers(user_id)
    )

    assert response.status_code == 200
    assert f"order={newest_order_id}" in response.json()["url"]


@pytest.mark.asyncio
async def test_unpurchased_product_is_forbidden(client: AsyncClient, seed, auth_headers):
    user_id = await seed.create_user()
    product_id = await seed.create_product("ebook")

    response = await client.post(
        f"/products/{product_id}/download-link", headers=auth_headers(user_id)
    )

    assert response.status_code == 403
    assert response.json()["error"]["code"] == "NOT_PURCHASED"


@pytest.mark.asyncio
@pytest.mark.parametrize("order_status", [OrderStatus.pending, OrderStatus.refunded, OrderStatus.cancelled])
async def test_incomplete_order_grants_nothing(client: AsyncClient, seed, auth_headers, order_status):
    user_id = await seed.create_user()
    product_id = await seed.create_product("ebook")
    await seed.create_order(user_id, [product_id], status=order_status)

    response = await client.post(
        f"/products/{product_id}/download-link", headers=auth_headers(user_id)
    )

    assert response.status_code == 403
    assert response.json()["error"]["code"] == "NOT_PURCHASED"


@pytest.mark.asyncio
async def test_someone_elses_order_grants_nothing(client: AsyncClient, seed, auth_headers):
    owner_id = await seed.create_user("buyer")
    other_id = await seed.create_user("other_buyer")
    product_id = await seed.create_product("ebook")
    await seed.create_order(owner_id, [product_id])

    response = await client.post(
        f"/products/{product_id}/download-link", headers=auth_headers(other_id)
    )

    assert response.status_code == 403
    assert response.json()["error"]["code"] == "NOT_PURCHASED"


@pytest.mark.asyncio
async def test_unknown_product_is_not_found(client: AsyncClient, seed, auth_headers):
    user_id = await seed.create_user()

    response = await client.post(
        f"/products/{uuid4()}/download-link", headers=auth_headers(user_id)
    )

    assert response.status_code == 404
    assert response.json()["error"]["code"] == "PRODUCT_NOT_FOUND"


@pytest.mark.asyncio
async def test_malformed_product_id_is_not_found(client: AsyncClient, seed, auth_headers):
    user_id = await seed.create_user()

    response = await client.post("/products/not-a-uuid/download-link", headers=auth_headers(user_id))

    assert response.status_code == 404


@pytest.mark.asyncio
async def test_link_requires_authentication(client: AsyncClient, seed):
    product_id = await seed.create_product("ebook")

    response = await client.post(f"/products/{product_id}/download-link")

    assert response.status_code in (401, 403)


@pytest.mark.asyncio
async def test_invalid_bearer_token_is_unauthorized(client: AsyncClient, seed):
    product_id = await seed.create_product("ebook")

    response = await client.post(
        f"/products/{product_id}/download-link",
        headers={"Authorization": "Bearer not-a-jwt"},
    )

    assert response.status_code == 401


@pytest.mark.asyncio
async def test_library_lists_completed_purchases(client: AsyncClient, seed, auth_headers, test_data):
    user_id = await seed.create_user()
    ebook_id = await seed.create_product("ebook")
    video_id = await seed.create_product("course_video")
    order_id = await seed.create_order(user_id, [ebook_id])
    await seed.create_order(user_id, [video_id], status=OrderStatus.pending)

    response = await client.get("/products/library", headers=auth_headers(user_id))

    assert response.status_code == 200
    items = response.json()["items"]
    assert len(items) == 1
    item = items[0]
    assert item["product_id"] == str(ebook_id)
    assert item["order_id"] == str(order_id)
    expected = test_data.get_item("responses", "library_item_ebook")
    assert exclude_keys(item, {"product_id", "order_id", "purchase_date"}) == expected
