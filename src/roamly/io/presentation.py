# roamly/io/presentation.py
import logging
from dataclasses import dataclass
from urllib.parse import parse_qs, urlparse

from roamly.domain.entities.destination import Destination

log = logging.getLogger(__name__)


def youtube_video_id(url: str) -> str | None:
    """Video id from youtu.be, youtube.com ``?v=`` and /embed|shorts|live/ links."""
    try:
        parsed = urlparse(url.strip())
    except ValueError:
        return None
    host = (parsed.hostname or "").lower().removeprefix("www.")
    parts = [p for p in parsed.path.split("/") if p]

    if host == "youtu.be":
        return parts[0] if parts else None
    if host.endswith("youtube.com") or host == "youtube-nocookie.com":
        v = parse_qs(parsed.query).get("v")
        if v and v[0]:
            return v[0]
        if len(parts) >= 2 and parts[0] in ("embed", "shorts", "live"):
            return parts[1]
    return None


def youtube_thumbnail_url(url: str) -> str | None:
    vid = youtube_video_id(url)
    return f"https://img.youtube.com/vi/{vid}/hqdefault.jpg" if vid else None


@dataclass(frozen=True)
class DetailsCard:
    title: str
    date: str
    description: str
    background_url: str | None
    video_url: str | None

    @property
    def has_video(self) -> bool:
        return self.video_url is not None

    @property
    def aria_label(self) -> str:
        if self.has_video:
            return f"Open video on YouTube: {self.title}"
        return f"Photo of: {self.title}"


def build_details_card(d: Destination) -> DetailsCard:
    video = (d.video_url or "").strip() or None
    image = (d.image_url or "").strip() or None
    thumb = youtube_thumbnail_url(video) if video else None
    return DetailsCard(
        title=d.name,
        date=d.date,
        description=d.description,
        background_url=image or thumb,
        video_url=video,
    )


class LoggingPresentation:
    """Headless Presentation: keeps status/card state and logs every change."""

    def __init__(self, logger: logging.Logger | None = None):
        self.log = logger or log
        self.status = ""
        self.card: DetailsCard | None = None

    def set_status(self, text: str) -> None:
        self.status = text
        self.log.info("status: %s", text)

    def show_details(self, destination: Destination) -> None:
        self.card = build_details_card(destination)
        self.log.info("details shown for %s (%s)", destination.name, destination.date)

    def hide_details(self) -> None:
        if self.card is not None:
            self.log.info("details hidden for %s", self.card.title)
        self.card = None

    def is_details_visible(self) -> bool:
        return self.card is not None
