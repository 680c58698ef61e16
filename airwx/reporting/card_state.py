"""Expanded/pinned card state for the airport list.

Pure UI state: the first station is pinned open, other cards toggle in
and out of the expanded set.
"""

from dataclasses import dataclass, field

from airwx.models.common import norm_id
from airwx.models.station import Station


@dataclass
class CardState:
    pinned_id: str = ""
    expanded: set[str] = field(default_factory=set)

    @classmethod
    def for_stations(cls, stations: list[Station]) -> "CardState":
        state = cls()
        state.repin(stations)
        return state

    def is_pinned(self, station_id: str) -> bool:
        return norm_id(station_id) == self.pinned_id

    def is_expanded(self, station_id: str) -> bool:
        sid = norm_id(station_id)
        return sid == self.pinned_id or sid in self.expanded

    def toggle(self, station_id: str) -> None:
        """Flip a card open/closed; the pinned card cannot be collapsed."""
        sid = norm_id(station_id)
        if not sid or sid == self.pinned_id:
            return
        if sid in self.expanded:
            self.expanded.discard(sid)
        else:
            self.expanded.add(sid)

    def repin(self, stations: list[Station], clear: bool = False) -> None:
        """Pin the first station; `clear` collapses everything else."""
        if clear:
            self.expanded.clear()
        self.pinned_id = norm_id(stations[0].id) if stations else ""
        if self.pinned_id:
            self.expanded.add(self.pinned_id)
