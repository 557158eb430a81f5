from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple

from ..core.fields import fields_of, location, resolve
from ..core.status import StatusChannel

ICON_DEFAULT = "red"
ICON_SELECTED = "blue"

SINGLE_MARKER_ZOOM = 15
FOCUS_ZOOM = 16


@dataclass
class PanelEntry:
    """One establishment: its marker, its side-panel line and its popup."""
    index: int
    lat: float
    lon: float
    name: str
    address: str
    postal_code: str
    commune: str
    type: str
    popup: str
    icon: str = ICON_DEFAULT
    selected: bool = False

    @property
    def coords(self) -> str:
        return f"{self.lat}, {self.lon}"


class ResultsPanel:
    """
    State behind the map and the side panel: markers, entries, selection and the
    coordinate export box. The map widget itself only mirrors this state.
    """

    def __init__(self, status: Optional[StatusChannel] = None):
        self.status = status
        self.entries: List[PanelEntry] = []
        self.selection: List[str] = []
        self.view: Optional[Dict[str, Any]] = None

    def reset(self) -> None:
        self.entries = []
        self.selection = []
        self.view = None

    @property
    def coords_text(self) -> str:
        return "\n".join(self.selection)

    def render(self, records: List[Dict[str, Any]], status: Optional[StatusChannel] = None) -> List[PanelEntry]:
        status = status or self.status
        self.reset()
        if not records:
            if status is not None:
                status.emit("Aucun établissement trouvé.", "error")
            return self.entries

        for idx, record in enumerate(records):
            fields = fields_of(record)
            loc = location(fields)
            if loc is None:
                continue
            lat, lon = loc
            name = resolve(fields, "name", "Établissement non nommé")
            address = resolve(fields, "address", "Adresse non spécifiée")
            postal_code = fields.get("code_postal") or ""
            commune = resolve(fields, "commune", "")
            kind = resolve(fields, "type", "Type non spécifié")
            popup = (
                f"{resolve(fields, 'name', 'Établissement')}\n"
                f"{resolve(fields, 'address', '')}\n"
                f"{postal_code} {commune}\n"
                f"Type: {resolve(fields, 'type', 'Non spécifié')}"
            )
            self.entries.append(
                PanelEntry(
                    index=idx, lat=lat, lon=lon, name=name, address=address,
                    postal_code=postal_code, commune=commune, type=kind, popup=popup,
                )
            )

        self.view = self._fit_view()
        return self.entries

    def _fit_view(self) -> Optional[Dict[str, Any]]:
        if not self.entries:
            return None
        if len(self.entries) == 1:
            e = self.entries[0]
            return {"center": (e.lat, e.lon), "zoom": SINGLE_MARKER_ZOOM}
        lats = [e.lat for e in self.entries]
        lons = [e.lon for e in self.entries]
        return {"bounds": ((min(lats), min(lons)), (max(lats), max(lons)))}

    def _entry(self, index: int) -> PanelEntry:
        for e in self.entries:
            if e.index == index:
                return e
        raise KeyError(f"no entry at index {index}")

    def toggle(self, index: int) -> str:
        """Select or deselect an entry; returns the export text."""
        e = self._entry(index)
        if e.selected:
            e.selected = False
            e.icon = ICON_DEFAULT
            if e.coords in self.selection:
                self.selection.remove(e.coords)
        else:
            e.selected = True
            e.icon = ICON_SELECTED
            self.selection.append(e.coords)
        return self.coords_text

    def focus(self, index: int) -> Tuple[float, float, int]:
        e = self._entry(index)
        self.view = {"center": (e.lat, e.lon), "zoom": FOCUS_ZOOM}
        return e.lat, e.lon, FOCUS_ZOOM
