"""Tests for PexelsService."""

from unittest.mock import AsyncMock, patch

import pytest
from conftest import make_response, make_session

from domain.result import Success
from services.pexels_service import PexelsService

PHOTO = {
    "id": 10,
    "width": 4000,
    "height": 3000,
    "photographer": "Joey",
    "src": {"original": "https://images.pexels.com/10.jpg"},
}

VIDEO = {
    "id": 77,
    "width": 1920,
    "height": 1080,
    "video_files": [
        {"file_type": "video/mp4", "width": 1920, "height": 1080, "link": "hd.mp4"}
    ],
}


@pytest.fixture
def service(caller):
    return PexelsService(caller, api_key="px")


def test_auth_header_is_raw_key(caller):
    assert PexelsService(caller, api_key="px")._auth_headers() == {"Authorization": "px"}


@pytest.mark.asyncio
async def test_get_featured_uses_curated(service):
    session = make_session(make_response({"page": 1, "photos": [PHOTO]}))

    with patch.object(service, "_get_session", AsyncMock(return_value=session)):
        outcome = await service.get_featured(1, 15)

    assert outcome.data[0].id == "pexels_photo_10"
    assert session.get.call_args.args[0] == "https://api.pexels.com/v1/curated"


@pytest.mark.asyncio
async def test_search_filters(service):
    session = make_session(make_response({"photos": []}))

    with patch.object(service, "_get_session", AsyncMock(return_value=session)):
        outcome = await service.search("ocean", 1, 15, {"orientation": "landscape"})

    assert outcome == Success([])
    params = session.get.call_args.kwargs["params"]
    assert params == {"query": "ocean", "page": 1, "per_page": 15, "orientation": "landscape"}


@pytest.mark.asyncio
async def test_get_photo_by_prefixed_id(service):
    session = make_session(make_response(PHOTO))

    with patch.object(service, "_get_session", AsyncMock(return_value=session)):
        outcome = await service.get_by_id("photo_10")

    assert outcome.data.id == "pexels_photo_10"
    assert session.get.call_args.args[0] == "https://api.pexels.com/v1/photos/10"


@pytest.mark.asyncio
async def test_get_video_by_prefixed_id(service):
    """Test video ids go to the video endpoint and map as live wallpapers."""
    session = make_session(make_response(VIDEO))

    with patch.object(service, "_get_session", AsyncMock(return_value=session)):
        outcome = await service.get_by_id("video_77")

    assert session.get.call_args.args[0] == "https://api.pexels.com/videos/videos/77"
    assert outcome.data.id == "pexels_video_77"
    assert outcome.data.is_live
    assert outcome.data.url == "hd.mp4"


@pytest.mark.asyncio
async def test_random_with_category_searches(service, mocker):
    session = make_session(make_response({"photos": [PHOTO]}))
    mocker.patch.object(service, "_get_session", AsyncMock(return_value=session))
    mocker.patch("services.pexels_service.random.randint", return_value=7)

    outcome = await service.get_random(5, "forest")

    assert len(outcome.data) == 1
    assert session.get.call_args.args[0] == "https://api.pexels.com/v1/search"
    assert session.get.call_args.kwargs["params"]["page"] == 7
    assert session.get.call_args.kwargs["params"]["query"] == "forest"


@pytest.mark.asyncio
async def test_collection_keeps_photos_only(service):
    session = make_session(
        make_response(
            {"media": [dict(PHOTO, type="Photo"), dict(VIDEO, type="Video")]}
        )
    )

    with patch.object(service, "_get_session", AsyncMock(return_value=session)):
        outcome = await service.get_by_collection("abc", 1, 10)

    assert [w.id for w in outcome.data] == ["pexels_photo_10"]
    assert session.get.call_args.kwargs["params"]["type"] == "photos"


@pytest.mark.asyncio
async def test_popular_videos(service):
    session = make_session(make_response({"videos": [VIDEO]}))

    with patch.object(service, "_get_session", AsyncMock(return_value=session)):
        outcome = await service.get_popular_videos(1, 10)

    assert outcome.data[0].is_premium
    assert session.get.call_args.args[0] == "https://api.pexels.com/videos/popular"


@pytest.mark.asyncio
async def test_download_tracking_is_noop(service):
    assert await service.track_download("photo_10") == Success(None)
