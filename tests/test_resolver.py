"""Tests for identifier resolution."""

import asyncio

import pytest

from animebing.client import (
    MissingIdentifier,
    NotFound,
    Resolver,
    StaleResolution,
    TransportFailure,
)
from animebing.client.resolver import matches_identifier
from fakes import FakeCatalogClient, RecordingNavigator

OBJECT_ID = "507f1f77bcf86cd799439011"


@pytest.fixture
def entries() -> list[dict]:
    return [
        {"id": OBJECT_ID, "slug": "one-piece", "title": "One Piece"},
        # A second entry whose slug happens to equal the first entry's id
        {"id": "65a000000000000000000002", "slug": OBJECT_ID, "title": "Impostor"},
        {"id": "65a000000000000000000003", "slug": None, "title": "My Favorite Show!"},
        {"id": "65a000000000000000000004", "slug": "naruto", "title": "Naruto 123"},
    ]


@pytest.fixture
def client(entries) -> FakeCatalogClient:
    return FakeCatalogClient(entries)


@pytest.fixture
def navigator() -> RecordingNavigator:
    return RecordingNavigator()


@pytest.fixture
def resolver(client, navigator) -> Resolver:
    return Resolver(client, navigator=navigator)


class TestResolveOrder:
    @pytest.mark.asyncio
    async def test_id_shaped_identifier_prefers_id_match(self, resolver, client):
        entry = await resolver.resolve(OBJECT_ID)

        assert entry["title"] == "One Piece"
        assert client.operations() == ["get_by_id"]

    @pytest.mark.asyncio
    async def test_non_id_identifier_skips_id_lookup(self, resolver, client):
        entry = await resolver.resolve("one-piece")

        assert entry["title"] == "One Piece"
        assert client.operations() == ["get_by_slug"]

    @pytest.mark.asyncio
    async def test_id_shaped_miss_falls_through_to_slug(self, client, navigator):
        client.entries.append({"id": "65a000000000000000000005", "slug": "abcdefabcdefabcdefabcdef", "title": "Hex"})
        resolver = Resolver(client, navigator=navigator)

        entry = await resolver.resolve("abcdefabcdefabcdefabcdef")

        assert entry["title"] == "Hex"
        assert client.operations() == ["get_by_id", "get_by_slug"]

    @pytest.mark.asyncio
    async def test_title_slug_found_by_full_scan(self, resolver, client):
        entry = await resolver.resolve("my-favorite-show-")

        assert entry["title"] == "My Favorite Show!"
        assert client.operations() == ["get_by_slug", "get_all"]

    @pytest.mark.asyncio
    async def test_stripped_title_slug_also_matches(self, resolver):
        entry = await resolver.resolve("my-favorite-show")

        assert entry["title"] == "My Favorite Show!"

    @pytest.mark.asyncio
    async def test_unknown_identifier_raises_not_found(self, resolver, client):
        with pytest.raises(NotFound) as exc_info:
            await resolver.resolve("does-not-exist-xyz")

        assert exc_info.value.identifier == "does-not-exist-xyz"
        assert client.operations() == ["get_by_slug", "get_all"]


class TestMissingIdentifier:
    @pytest.mark.asyncio
    @pytest.mark.parametrize("identifier", ["", None])
    async def test_rejects_without_any_request(self, resolver, client, identifier):
        with pytest.raises(MissingIdentifier):
            await resolver.resolve(identifier)

        assert client.calls == []


class TestCanonicalization:
    @pytest.mark.asyncio
    async def test_alias_resolution_replaces_location(self, resolver, navigator):
        entry = await resolver.resolve("naruto-123")

        assert entry["slug"] == "naruto"
        assert navigator.replaced == ["/detail/naruto"]
        assert navigator.pushed == []

    @pytest.mark.asyncio
    async def test_slug_hit_leaves_location_alone(self, resolver, navigator):
        await resolver.resolve("naruto")

        assert navigator.replaced == []

    @pytest.mark.asyncio
    async def test_id_identifier_is_not_rewritten(self, resolver, navigator):
        await resolver.resolve(OBJECT_ID)

        assert navigator.replaced == []

    @pytest.mark.asyncio
    async def test_entry_without_slug_is_not_rewritten(self, resolver, navigator):
        await resolver.resolve("my-favorite-show")

        assert navigator.replaced == []


class TestTransportFailures:
    @pytest.mark.asyncio
    async def test_id_lookup_outage_aborts(self, resolver, client):
        client.fail.add("get_by_id")

        with pytest.raises(TransportFailure):
            await resolver.resolve(OBJECT_ID)

        assert client.operations() == ["get_by_id"]

    @pytest.mark.asyncio
    async def test_slug_lookup_outage_aborts_before_scan(self, resolver, client):
        client.fail.add("get_by_slug")

        with pytest.raises(TransportFailure):
            await resolver.resolve("naruto-123")

        assert "get_all" not in client.operations()

    @pytest.mark.asyncio
    async def test_scan_outage_is_not_reported_as_not_found(self, resolver, client):
        client.fail.add("get_all")

        with pytest.raises(TransportFailure):
            await resolver.resolve("naruto-123")


class TestFullScanLimit:
    @pytest.mark.asyncio
    async def test_entries_beyond_limit_are_not_scanned(self, client, navigator):
        resolver = Resolver(client, navigator=navigator, full_scan_limit=2)

        with pytest.raises(NotFound):
            await resolver.resolve("naruto-123")


class TestStaleResolutions:
    @pytest.mark.asyncio
    async def test_slow_older_resolution_is_discarded(self, resolver, client, navigator):
        gate = asyncio.Event()
        client.gates["naruto-123"] = gate

        slow = asyncio.create_task(resolver.resolve("naruto-123"))
        await asyncio.sleep(0)

        fresh = await resolver.resolve("one-piece")
        assert fresh["title"] == "One Piece"

        gate.set()
        with pytest.raises(StaleResolution):
            await slow

        # The stale alias must not rewrite the URL of the newer page
        assert navigator.replaced == []

    @pytest.mark.asyncio
    async def test_stale_not_found_is_also_discarded(self, resolver, client):
        gate = asyncio.Event()
        client.gates["nothing-here"] = gate

        slow = asyncio.create_task(resolver.resolve("nothing-here"))
        await asyncio.sleep(0)
        await resolver.resolve("naruto")

        gate.set()
        with pytest.raises(StaleResolution):
            await slow


def test_matches_identifier_checks_slug_id_and_title():
    entry = {"id": "abc", "slug": "slugged", "title": "Attack on Titan: Final"}

    assert matches_identifier(entry, "slugged")
    assert matches_identifier(entry, "abc")
    assert matches_identifier(entry, "attack-on-titan-final")
    assert not matches_identifier(entry, "attack-on-titan")
