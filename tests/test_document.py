import pytest
from pydantic import ValidationError

from birthday_site.document import (
    BirthdayConfig,
    ProcessedVideo,
    VideoKind,
    default_config,
    embed_url,
    google_drive_id,
    process_video_link,
    youtube_id,
)


# ── Configuration document ──────────────────────────────────


def test_camel_case_round_trip():
    config = BirthdayConfig.model_validate({"recipientName": "Ava", "finalMessage": "Bye"})
    assert config.recipient_name == "Ava"
    data = config.to_json_dict()
    assert data["recipientName"] == "Ava"
    assert data["finalMessage"] == "Bye"
    assert "recipient_name" not in data


def test_snake_case_accepted():
    assert BirthdayConfig(recipient_name="Ava").recipient_name == "Ava"


def test_missing_and_null_collections_are_empty():
    config = BirthdayConfig.model_validate({"photos": None, "playlist": None})
    assert config.photos == []
    assert config.playlist == []
    assert config.bento_items == []
    assert config.videos == []
    assert config.initial_track is None


def test_document_is_frozen():
    config = BirthdayConfig(recipient_name="Ava")
    with pytest.raises(ValidationError):
        config.recipient_name = "Ben"


def test_initial_track_is_first_entry(config):
    assert config.initial_track.id == "jfKfPfyJRdk"


def test_default_config_is_complete():
    config = default_config()
    assert config.recipient_name
    assert 3 <= len(config.bento_items) <= 5
    assert config.photos
    assert config.playlist


# ── Processed video invariant ───────────────────────────────


def test_stream_video_needs_id_only():
    assert ProcessedVideo(type="youtube", id="abc").id == "abc"
    with pytest.raises(ValidationError):
        ProcessedVideo(type="youtube", url="https://example.com/v.mp4")
    with pytest.raises(ValidationError):
        ProcessedVideo(type="googledrive", id="x", url="https://example.com")


def test_data_video_needs_url_only():
    assert ProcessedVideo(type="data", url="data:video/mp4;base64,AAAA").url
    with pytest.raises(ValidationError):
        ProcessedVideo(type="data", id="abc")


# ── Link recognition ────────────────────────────────────────


@pytest.mark.parametrize("url", [
    "https://www.youtube.com/watch?v=dQw4w9WgXcQ",
    "https://youtu.be/dQw4w9WgXcQ",
    "https://www.youtube.com/embed/dQw4w9WgXcQ",
    "https://www.youtube.com/shorts/dQw4w9WgXcQ",
    "https://www.youtube.com/watch?feature=share&v=dQw4w9WgXcQ",
])
def test_youtube_id(url):
    assert youtube_id(url) == "dQw4w9WgXcQ"


def test_youtube_id_rejects_short_ids():
    assert youtube_id("https://youtu.be/abc") is None
    assert youtube_id("https://example.com") is None


def test_google_drive_id():
    assert google_drive_id("https://drive.google.com/file/d/1AbC_d-E/view?usp=sharing") == "1AbC_d-E"
    assert google_drive_id("https://drive.google.com/open?id=XYZ123") == "XYZ123"
    assert google_drive_id("https://example.com/file/d/abc") is None


def test_process_video_link_kinds():
    assert process_video_link("https://youtu.be/dQw4w9WgXcQ").type == VideoKind.YOUTUBE
    assert process_video_link("https://drive.google.com/file/d/abc/view").type == VideoKind.GOOGLE_DRIVE
    direct = process_video_link("https://cdn.example.com/clip.mp4?token=1")
    assert direct.type == VideoKind.DATA
    assert direct.url.endswith("token=1")
    assert process_video_link("https://example.com/page") is None
    assert process_video_link("   ") is None


def test_embed_urls():
    assert embed_url(ProcessedVideo(type="youtube", id="dQw4w9WgXcQ")) == "https://www.youtube.com/embed/dQw4w9WgXcQ"
    assert embed_url(ProcessedVideo(type="googledrive", id="abc")) == "https://drive.google.com/file/d/abc/preview"
    assert embed_url(ProcessedVideo(type="data", url="/uploads/a.mp4")) == "/uploads/a.mp4"
