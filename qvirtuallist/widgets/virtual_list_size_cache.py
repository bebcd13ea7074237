"""LRU-bounded cache of measured item sizes with a confidence model.

Each entry carries a measurement state so that noisy re-measurements do not
make the layout jitter:

    (none) --observe--> Measured(v, validated=False)
    Measured(v, False) --within tolerance--> Measured(v, True)
    Measured(v, True)  --within tolerance--> Verified(v, 1)
    Verified(v, k)     --within tolerance--> Verified(v, min(k + 1, 10))
    any state          --outside tolerance--> Measured(observed, False)
"""

from collections import OrderedDict
from dataclasses import dataclass

from PySide6.QtCore import QSize

MAX_STABLE_COUNT = 10


@dataclass(frozen=True)
class Measured:
    value: int
    validated: bool = False


@dataclass(frozen=True)
class Verified:
    value: int
    stable_count: int = 1


MeasurementState = Measured | Verified


def next_measurement_state(previous: MeasurementState | None, observed: int,
                           tolerance: int) -> MeasurementState:
    """Apply one observation to a measurement state."""
    if previous is None or abs(observed - previous.value) > tolerance:
        return Measured(observed, validated=False)
    if isinstance(previous, Measured):
        if not previous.validated:
            return Measured(previous.value, validated=True)
        return Verified(previous.value, stable_count=1)
    return Verified(previous.value, stable_count=min(previous.stable_count + 1, MAX_STABLE_COUNT))


@dataclass
class CacheEntry:
    size: QSize
    state: MeasurementState
    # Viewport cross-axis extent when the measurement was taken.
    measured_at: int
    generation: int = 0

    @property
    def extent(self) -> int:
        """Trusted extent along the scroll axis."""
        return self.state.value

    @property
    def is_verified(self) -> bool:
        return isinstance(self.state, Verified)


class SizeCache:
    """Maps item index to its last measured size, evicting least recently used."""

    def __init__(self, capacity: int = 100, tolerance: int = 2):
        self._entries: OrderedDict[int, CacheEntry] = OrderedDict()
        self.capacity = max(1, capacity)
        self.tolerance = tolerance
        self.generation = 0
        self._cycle_observed = set()

    def __len__(self):
        return len(self._entries)

    def __contains__(self, index):
        return index in self._entries

    def indices(self) -> list[int]:
        """Indices from least to most recently used."""
        return list(self._entries.keys())

    def get(self, index: int) -> CacheEntry | None:
        """Look up an entry that drives a rendering decision; marks it recently used."""
        entry = self._entries.get(index)
        if entry is not None:
            self._entries.move_to_end(index)
        return entry

    def peek(self, index: int) -> CacheEntry | None:
        """Look up an entry without touching LRU order."""
        return self._entries.get(index)

    def insert(self, index: int, entry: CacheEntry):
        self._entries[index] = entry
        self._entries.move_to_end(index)
        if len(self._entries) > self.capacity:
            self._entries.popitem(last=False)

    def remove(self, index: int) -> bool:
        return self._entries.pop(index, None) is not None

    def clear(self):
        self._entries.clear()
        self._cycle_observed.clear()
        self.generation += 1

    def advance_generation(self):
        self.generation += 1

    def set_capacity(self, capacity: int):
        self.capacity = max(1, capacity)
        while len(self._entries) > self.capacity:
            self._entries.popitem(last=False)

    def begin_cycle(self):
        """Start an update cycle; repeated observations within it confirm nothing."""
        self._cycle_observed.clear()

    def record_measurement(self, index: int, size: QSize, extent: int, measured_at: int) -> CacheEntry:
        """Store an observation of `index` through the confidence transition."""
        previous = self._entries.get(index)
        previous_state = previous.state if previous is not None else None
        if (
            previous is not None
            and index in self._cycle_observed
            and abs(extent - previous.state.value) <= self.tolerance
        ):
            # Same-cycle duplicate; keep the state, refresh recency.
            state = previous_state
        else:
            state = next_measurement_state(previous_state, extent, self.tolerance)
        self._cycle_observed.add(index)
        entry = CacheEntry(size=QSize(size), state=state, measured_at=measured_at,
                           generation=self.generation)
        self.insert(index, entry)
        return entry

    def entries(self):
        """(index, entry) pairs without touching LRU order."""
        return list(self._entries.items())
