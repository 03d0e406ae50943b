"""Content for each step's panel, derived from the configuration document.

The client renders these dicts; collections that are empty simply render
empty (an empty bento grid or gallery is not an error).
"""

from typing import Any, Callable

from ..document.media_links import embed_url
from ..document.schema import BirthdayConfig
from .steps import CONTINUE_LABELS, Step, panel_id


def polaroid_rotation(index: int) -> float:
    """Alternating resting tilt for the i-th photo card, degrees."""
    return (-1 if index % 2 == 0 else 1) * (2 + index)


def _welcome(config: BirthdayConfig) -> dict:
    return {
        "emoji": "❤️",
        "heading": f"Hey {config.recipient_name},",
        "body": config.welcome_message,
    }


def _birthday(config: BirthdayConfig) -> dict:
    return {"emoji": "🎉", "heading": "Happy Birthday!", "body": config.birthday_message}


def _reasons(config: BirthdayConfig) -> dict:
    items = config.bento_items
    odd = len(items) % 2 != 0
    return {
        "heading": "A Few Things I Adore About You",
        "items": [
            {
                "icon": item.icon,
                "title": item.title,
                "text": item.text,
                # Last tile of an odd grid spans both columns
                "col_span": 2 if odd and i == len(items) - 1 else 1,
            }
            for i, item in enumerate(items)
        ],
    }


def _gallery(config: BirthdayConfig) -> dict:
    return {
        "heading": config.gallery_title,
        "photos": [
            {"url": photo.url, "caption": photo.caption, "rotation": polaroid_rotation(i)}
            for i, photo in enumerate(config.photos)
        ],
        "closing": config.gallery_closing,
    }


def _videos(config: BirthdayConfig) -> dict:
    return {
        "heading": "Moments in Motion",
        "videos": [
            {
                "caption": video.caption,
                "type": video.processed.type.value,
                "src": embed_url(video.processed),
            }
            for video in config.videos
        ],
    }


def _playlist(config: BirthdayConfig) -> dict:
    return {
        "heading": "Songs That Remind Me of You",
        "tracks": [{"index": i, "title": t.title, "id": t.id} for i, t in enumerate(config.playlist)],
    }


def _letter(config: BirthdayConfig) -> dict:
    return {"heading": "A Letter For You", "body": config.letter}


def _wish(config: BirthdayConfig) -> dict:
    return {
        "emoji": "🎂",
        "heading": "My Wish For You",
        "body": config.wish_message,
        "description": config.wish_description,
        "final_message": config.final_message,
    }


_RENDERERS: dict[Step, Callable[[BirthdayConfig], dict]] = {
    Step.WELCOME: _welcome,
    Step.BIRTHDAY: _birthday,
    Step.REASONS: _reasons,
    Step.GALLERY: _gallery,
    Step.VIDEOS: _videos,
    Step.PLAYLIST: _playlist,
    Step.LETTER: _letter,
    Step.WISH: _wish,
}


def render_panel(step: Step, config: BirthdayConfig) -> dict[str, Any]:
    """Panel content for one step."""
    content = _RENDERERS[step](config)
    content["id"] = panel_id(step)
    content["step"] = int(step)
    content["continue_label"] = CONTINUE_LABELS.get(step)
    return content


def render_all(config: BirthdayConfig) -> list[dict[str, Any]]:
    return [render_panel(step, config) for step in Step]
