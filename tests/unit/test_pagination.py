"""
Tests for solapi.pagination module.
"""
import pytest

from solapi.exceptions import SolapiDataError
from solapi.models import Page
from solapi.pagination import KeyPaginator, next_key_of


def _page(items, next_key=None, start_key=None) -> Page:
    return Page(start_key=start_key, limit=2, next_key=next_key, items=tuple(items))


class TestNextKeyOf:
    """Tests for next_key_of function."""

    def test_page(self):
        assert next_key_of(_page([], next_key="k2")) == "k2"

    def test_raw_response(self):
        assert next_key_of({"nextKey": "k2", "groupList": {}}) == "k2"

    def test_missing_key_is_last_page(self):
        assert next_key_of({"groupList": {}}) is None

    def test_invalid_type(self):
        with pytest.raises(SolapiDataError):
            next_key_of(["not", "a", "page"])


class TestKeyPaginator:
    """Tests for KeyPaginator class."""

    @pytest.mark.asyncio
    async def test_follows_next_key(self):
        """Each request should start from the previous nextKey."""
        pages = {
            None: _page([1, 2], next_key="k2"),
            "k2": _page([3, 4], next_key="k3", start_key="k2"),
            "k3": _page([5], start_key="k3"),
        }
        requested = []

        async def fetch_page(start_key):
            requested.append(start_key)
            return pages[start_key]

        items = await KeyPaginator(fetch_page).fetch_all()

        assert items == [1, 2, 3, 4, 5]
        assert requested == [None, "k2", "k3"]

    @pytest.mark.asyncio
    async def test_single_page(self):
        calls = []

        async def fetch_page(start_key):
            calls.append(start_key)
            return _page(["only"])

        pages = [page async for page in KeyPaginator(fetch_page).paginate()]

        assert len(pages) == 1
        assert calls == [None]

    @pytest.mark.asyncio
    async def test_max_pages(self):
        counter = {"n": 0}

        async def fetch_page(start_key):
            counter["n"] += 1
            return _page([counter["n"]], next_key=f"k{counter['n'] + 1}")

        items = await KeyPaginator(fetch_page, max_pages=3).fetch_all()

        assert items == [1, 2, 3]

    @pytest.mark.asyncio
    async def test_repeated_key(self):
        """A server returning the same key twice should not loop forever."""
        async def fetch_page(start_key):
            return _page(["x"], next_key="same")

        with pytest.raises(SolapiDataError, match="did not advance"):
            await KeyPaginator(fetch_page).fetch_all()

    @pytest.mark.asyncio
    async def test_raw_responses(self):
        """Raw dict listings should be combined by items_key."""
        responses = {
            None: {"nextKey": "G2", "groupList": {"G1": {"groupId": "G1"}}},
            "G2": {"nextKey": None, "groupList": {"G2": {"groupId": "G2"}}},
        }

        async def fetch_page(start_key):
            return responses[start_key]

        items = await KeyPaginator(fetch_page).fetch_all(items_key="groupList")

        assert [item["groupId"] for item in items] == ["G1", "G2"]

    @pytest.mark.asyncio
    async def test_raw_responses_need_items_key(self):
        async def fetch_page(start_key):
            return {"nextKey": None, "groupList": []}

        with pytest.raises(SolapiDataError):
            await KeyPaginator(fetch_page).fetch_all()

    @pytest.mark.asyncio
    async def test_resume_from_start_key(self):
        requested = []

        async def fetch_page(start_key):
            requested.append(start_key)
            return _page([], start_key=start_key)

        await KeyPaginator(fetch_page).fetch_all(start_key="k9")

        assert requested == ["k9"]
