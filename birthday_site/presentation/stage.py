"""Server-side model of what the client has on screen.

Panels and UI elements are plain objects with animatable attributes. The
client mirrors them from ``view_state`` messages; nothing here knows about
HTML.
"""

import logging
from collections import defaultdict
from dataclasses import asdict, dataclass, field
from typing import Any, Callable, Optional

logger = logging.getLogger(__name__)

Listener = Callable[[Any], None]


@dataclass
class Element:
    """An animatable visual element."""

    id: str
    visible: bool = True
    opacity: float = 1.0
    scale: float = 1.0
    y: float = 0.0

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass
class Rect:
    """A bounding box in client pixels."""

    left: float = 0.0
    top: float = 0.0
    width: float = 0.0
    height: float = 0.0


class EventTarget:
    """Named-event listener registry, the stand-in for a DOM node."""

    def __init__(self, name: str):
        self.name = name
        self._listeners: dict[str, list[Listener]] = defaultdict(list)

    def add_listener(self, event_type: str, listener: Listener) -> None:
        if listener not in self._listeners[event_type]:
            self._listeners[event_type].append(listener)

    def remove_listener(self, event_type: str, listener: Listener) -> None:
        listeners = self._listeners.get(event_type, [])
        if listener in listeners:
            listeners.remove(listener)

    def listener_count(self, event_type: Optional[str] = None) -> int:
        if event_type is not None:
            return len(self._listeners.get(event_type, []))
        return sum(len(v) for v in self._listeners.values())

    def dispatch(self, event_type: str, event: Any) -> int:
        """Deliver ``event`` to every listener. Returns how many ran."""
        listeners = list(self._listeners.get(event_type, []))
        for listener in listeners:
            listener(event)
        return len(listeners)


@dataclass
class Stage:
    """Everything the presentation engine animates besides the 3D scene."""

    panels: dict[str, Element] = field(default_factory=dict)
    elements: dict[str, Element] = field(default_factory=dict)
    gallery_container: EventTarget = field(default_factory=lambda: EventTarget("photo-gallery-wrapper"))
    gallery_strip: EventTarget = field(default_factory=lambda: EventTarget("photo-gallery"))

    def add_panel(self, panel_id: str) -> Element:
        panel = Element(panel_id, visible=False)
        self.panels[panel_id] = panel
        return panel

    def add_element(self, element_id: str, **attrs) -> Element:
        element = Element(element_id, **attrs)
        self.elements[element_id] = element
        return element

    def panel(self, panel_id: str) -> Optional[Element]:
        return self.panels.get(panel_id)

    def element(self, element_id: str) -> Optional[Element]:
        return self.elements.get(element_id)

    def visible_panels(self) -> list[str]:
        return [pid for pid, p in self.panels.items() if p.visible]

    def to_dict(self) -> dict:
        return {
            "panels": {pid: p.to_dict() for pid, p in self.panels.items()},
            "elements": {eid: e.to_dict() for eid, e in self.elements.items()},
        }
