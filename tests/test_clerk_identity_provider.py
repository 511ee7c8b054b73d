"""Tests for the Clerk identity adapter, using httpx.MockTransport."""

import httpx
import pytest

from app.adapters.identity.clerk_client import ClerkIdentityProvider
from app.core.errors import IdentityProviderAppError, NotFoundAppError
from conftest import ALICE, BOB


def _provider(handler) -> ClerkIdentityProvider:
    return ClerkIdentityProvider(
        secret_key="sk_test_123",
        base_url="https://clerk.test",
        transport=httpx.MockTransport(handler),
    )


@pytest.mark.asyncio
async def test_lists_users_by_id_in_one_call() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json=[ALICE, BOB])

    provider = _provider(handler)
    users = await provider.get_user_list(user_ids=["user_alice", "user_bob", "user_alice"], limit=100)

    assert [u["id"] for u in users] == ["user_alice", "user_bob"]
    assert len(seen) == 1
    request = seen[0]
    assert request.url.path == "/v1/users"
    assert request.url.params.get_list("user_id") == ["user_alice", "user_bob"]
    assert request.url.params["limit"] == "100"
    assert request.headers["Authorization"] == "Bearer sk_test_123"
    await provider.close()


@pytest.mark.asyncio
async def test_list_authors_drops_private_fields() -> None:
    provider = _provider(lambda request: httpx.Response(200, json=[ALICE]))

    authors = await provider.list_authors(user_ids=["user_alice"])

    assert [a.model_dump() for a in authors] == [
        {
            "id": "user_alice",
            "username": "alice",
            "profile_image_url": "https://img.example.com/alice.png",
        }
    ]


@pytest.mark.asyncio
async def test_username_lookup() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.params.get_list("username") == ["bob"]
        assert request.url.params["limit"] == "1"
        return httpx.Response(200, json=[BOB])

    author = await _provider(handler).get_user_by_username("bob")

    assert author.id == "user_bob"
    assert author.profile_image_url == "https://img.example.com/bob.png"


@pytest.mark.asyncio
async def test_unknown_username_is_not_found() -> None:
    provider = _provider(lambda request: httpx.Response(200, json=[]))

    with pytest.raises(NotFoundAppError) as exc_info:
        await provider.get_user_by_username("nobody")

    assert exc_info.value.code == "user_not_found"


@pytest.mark.asyncio
async def test_wrapped_payload_is_unwrapped() -> None:
    provider = _provider(lambda request: httpx.Response(200, json={"data": [ALICE], "total_count": 1}))

    users = await provider.get_user_list(user_ids=["user_alice"])

    assert users[0]["id"] == "user_alice"


@pytest.mark.asyncio
async def test_empty_filter_skips_the_call() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise AssertionError("no request expected")

    assert await _provider(handler).get_user_list(user_ids=[]) == []


@pytest.mark.asyncio
async def test_http_error_is_mapped() -> None:
    provider = _provider(lambda request: httpx.Response(500, json={"errors": []}))

    with pytest.raises(IdentityProviderAppError) as exc_info:
        await provider.get_user_list(user_ids=["user_alice"])

    assert exc_info.value.code == "identity_provider_error"
    assert exc_info.value.details["http_status"] == 500


@pytest.mark.asyncio
async def test_transport_error_is_mapped() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(IdentityProviderAppError):
        await _provider(handler).get_user_list(user_ids=["user_alice"])


@pytest.mark.asyncio
async def test_unexpected_payload_is_rejected() -> None:
    provider = _provider(lambda request: httpx.Response(200, json={"object": "error"}))

    with pytest.raises(IdentityProviderAppError):
        await provider.get_user_list(user_ids=["user_alice"])


@pytest.mark.asyncio
async def test_lookup_size_is_capped() -> None:
    provider = _provider(lambda request: httpx.Response(200, json=[]))

    with pytest.raises(ValueError):
        await provider.list_authors(user_ids=[f"user_{i}" for i in range(101)])
    with pytest.raises(ValueError):
        await provider.list_authors(user_ids=["user_alice"], limit=0)
