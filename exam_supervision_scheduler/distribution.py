"""
Supervisor distribution engine.

Randomized greedy allocation of supervisors to the rooms of one exam day and
period. The engine is pure apart from the injected shuffler: it never touches
the schedule store, and problems are reported on the returned result rather
than raised.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Mapping, Optional, Protocol, Sequence, Set, Tuple, TypeVar

import numpy as np

from .errors import InsufficientSupervisors, NoSupervisorsAvailable, SupervisionError
from .log import get_logger
from .models import Assignment, Room

log = get_logger(__name__)

T = TypeVar('T')


class Shuffler(Protocol):
    def shuffle(self, items: Sequence[T]) -> List[T]:
        ...


class RandomShuffler:
    """Uniform shuffle backed by a numpy ``Generator``; pass a seed for repeatable runs."""

    def __init__(self, seed: Optional[int] = None):
        self.rng = np.random.default_rng(seed)

    def shuffle(self, items: Sequence[T]) -> List[T]:
        items = list(items)
        return [items[i] for i in self.rng.permutation(len(items))]


@dataclass
class DistributionResult:
    """
    Outcome of one distribution run.

    ``error`` is set when no assignment could be produced at all. ``warnings``
    lists non-fatal conditions; the assignments are still usable.
    """

    assignments: List[Assignment] = field(default_factory=list)
    required: int = 0
    available: int = 0
    reused: List[str] = field(default_factory=list)
    excluded_used: List[str] = field(default_factory=list)
    error: Optional[SupervisionError] = None
    warnings: List[InsufficientSupervisors] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def shortfall(self) -> int:
        return max(0, self.required - self.available)

    @property
    def insufficient(self) -> bool:
        return any(isinstance(w, InsufficientSupervisors) for w in self.warnings)

    def raise_for_error(self) -> None:
        if self.error is not None:
            raise self.error


def assigned_names(assignments: Optional[Iterable[Assignment]]) -> Set[str]:
    """Every supervisor name used in ``assignments``."""
    names = set()
    for assignment in assignments or []:
        names.update(assignment.supervisors)
    return names


def pin_main_supervisors(assignments: Optional[Iterable[Assignment]]) -> Dict[str, List[str]]:
    """Map each room to its main supervisor, for carrying into the next period."""
    return {
        a.room: [a.main_supervisor]
        for a in assignments or []
        if a.main_supervisor
    }


def _next_reuse(candidates: List[str], taken: List[str], cursor: int) -> Tuple[str, int]:
    # Cycle through the candidates, avoiding a name already in this room.
    for offset in range(len(candidates)):
        name = candidates[(cursor + offset) % len(candidates)]
        if name not in taken:
            return name, cursor + offset + 1
    return candidates[cursor % len(candidates)], cursor + 1


def distribute(supervisor_pool: Iterable[str],
               rooms: Sequence[Room],
               prior_assignments: Optional[Iterable[Assignment]] = None,
               *,
               shuffler: Optional[Shuffler] = None,
               requirements: Optional[Mapping[str, int]] = None,
               pinned: Optional[Mapping[str, Sequence[str]]] = None,
               strict_exclusion: bool = False) -> DistributionResult:
    """
    Assign supervisors to every room of one (day, period).

    Args:
        supervisor_pool: Supervisor names; duplicates count once
        rooms: Rooms in display order
        prior_assignments: The same day's other period; its supervisors are
            only used once every other name has been used
        shuffler: Source of randomness, defaults to an unseeded RandomShuffler
        requirements: Supervisors per room type
        pinned: Room name -> names fixed in the first slot(s) of that room
        strict_exclusion: Never use supervisors from ``prior_assignments``

    Returns:
        DistributionResult with one assignment per room, in room order
    """
    rooms = list(rooms)
    required = [room.required_count(dict(requirements) if requirements else None) for room in rooms]
    total_required = sum(required)
    pool = list(dict.fromkeys(name for name in supervisor_pool if name))

    if not pool:
        log.warning("no_supervisors_available", rooms=len(rooms))
        return DistributionResult(
            required=total_required,
            error=NoSupervisorsAvailable("No supervisors available for distribution"),
        )
    if not rooms:
        return DistributionResult(available=len(pool))

    shuffler = shuffler or RandomShuffler()
    excluded = assigned_names(prior_assignments)

    # A name pinned to more than one room keeps only its first room.
    seeded: Dict[int, List[str]] = {}
    pinned_names: Set[str] = set()
    for i, room in enumerate(rooms):
        names = []
        for name in (pinned or {}).get(room.name, []):
            if name and name not in pinned_names and len(names) < required[i]:
                names.append(name)
                pinned_names.add(name)
        if names:
            seeded[i] = names

    shuffled = shuffler.shuffle(pool)
    preferred = [n for n in shuffled if n not in excluded]
    fallback = [] if strict_exclusion else [n for n in shuffled if n in excluded]
    candidates = preferred + fallback

    to_fill = sum(required[i] - len(seeded.get(i, [])) for i in range(len(rooms)))
    if to_fill and not candidates:
        log.warning("no_supervisors_available", rooms=len(rooms), excluded=len(excluded))
        return DistributionResult(
            required=total_required,
            available=len(pinned_names),
            error=NoSupervisorsAvailable("Every supervisor is excluded for this period"),
        )

    available = len(set(preferred) | pinned_names)
    used = set(pinned_names)
    picked: Dict[int, List[str]] = {}
    reused: List[str] = []
    excluded_used: List[str] = []
    cursor = 0

    # Fewer slots first: single-supervisor rooms before special rooms.
    for i in sorted(range(len(rooms)), key=lambda k: required[k]):
        names = list(seeded.get(i, []))
        while len(names) < required[i]:
            name = next((n for n in candidates if n not in used), None)
            if name is None:
                name, cursor = _next_reuse(candidates, names, cursor)
                reused.append(name)
            elif name in excluded:
                excluded_used.append(name)
            used.add(name)
            names.append(name)
        picked[i] = names

    result = DistributionResult(
        assignments=[
            Assignment(room=room.name, supervisors=picked[i], room_type=room.type)
            for i, room in enumerate(rooms)
        ],
        required=total_required,
        available=available,
        reused=reused,
        excluded_used=excluded_used,
    )
    if total_required > available:
        warning = InsufficientSupervisors(total_required, available, reused=reused + excluded_used)
        result.warnings.append(warning)
        log.warning("insufficient_supervisors", required=total_required,
                    available=available, shortfall=warning.shortfall)

    log.debug("distributed", rooms=len(rooms), slots=total_required,
              supervisors=len(pool), excluded=len(excluded), pinned=len(pinned_names))
    return result
