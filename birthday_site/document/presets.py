"""Starter configuration used to seed the setup form."""

from .schema import BentoItem, BirthdayConfig, Photo, PlaylistItem


DEFAULT_CONFIG = BirthdayConfig(
    recipient_name="Beautiful",
    welcome_message="I built a little world for you...",
    birthday_message="Another year of you making the world brighter.",
    bento_items=[
        BentoItem(
            icon="✨",
            title="Your Unmatched Kindness",
            text="The genuine warmth you show to everyone is something truly rare and beautiful.",
        ),
        BentoItem(icon="😊", title="That Smile", text="It's a work of art."),
        BentoItem(icon="🌟", title="Your Radiant Spirit", text="Your passion for life is infectious."),
    ],
    gallery_title="A Gallery of Memories",
    photos=[
        Photo(url="https://i.ibb.co/6Z6XgCg/crush.webp", caption="Our favorite memory."),
        Photo(
            url="https://images.unsplash.com/photo-1524250502761-1ac6f2e30d43?q=80&w=1888",
            caption="That day at the cafe.",
        ),
    ],
    gallery_closing="Every moment with you feels like a scene...",
    letter=(
        "My Dearest Beautiful,\n\n"
        "On your special day, I find myself reflecting on all the moments we've shared, "
        "big and small. Each one is a treasure, a testament to the incredible person you are. "
        "From your infectious laugh to the quiet way you listen, you make every day brighter.\n\n"
        "I hope the year ahead brings you as much joy and light as you bring to everyone "
        "around you. May all your dreams take flight."
    ),
    wish_message="May the next year bring you all the love...",
    wish_description="Write a wish, then send it up to the stars.",
    final_message="Happy Birthday! ❤️",
    playlist=[PlaylistItem(title="Lofi beats", id="jfKfPfyJRdk")],
)


def default_config() -> BirthdayConfig:
    """Get the starter configuration."""
    return DEFAULT_CONFIG
