"""
Candidate bookkeeping and diversity-aware selection.

Candidates are grouped by structural origin (which corner, edge, edge
pair, grid phase... produced them). Each group is ranked by score and the
groups are interleaved round-robin, so successive seeds walk through
different anchors before revisiting the same family.
"""
import logging
import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional, Sequence, Tuple
from shapely.geometry.base import BaseGeometry

logger = logging.getLogger(__name__)


class OriginKind(str, Enum):
    CORNER = "corner"
    EDGE = "edge"
    EDGE_WINDOW = "edge_window"
    EDGE_PAIR = "edge_pair"
    TARGET = "target"
    GRID = "grid"
    SWEEP = "sweep"
    RING = "ring"

    @property
    def rank(self) -> int:
        return list(OriginKind).index(self)


class SizeVariant(str, Enum):
    COMPACT = "compact"
    STANDARD = "standard"
    DEEP = "deep"

    @property
    def rank(self) -> int:
        return list(SizeVariant).index(self)


@dataclass(frozen=True)
class CandidateOrigin:
    kind: OriginKind
    index: int
    variant: SizeVariant = SizeVariant.STANDARD

    @property
    def group_key(self) -> Tuple[int, int]:
        return (self.kind.rank, self.index)


class ShapeArena:
    """
    Per-call store of immutable polygons.

    Wings, their segments and the candidates assembled from them refer to
    each other by integer id instead of carrying geometry copies around.
    """

    def __init__(self):
        self._shapes: List[BaseGeometry] = []

    def add(self, geom: BaseGeometry) -> int:
        self._shapes.append(geom)
        return len(self._shapes) - 1

    def extend(self, geoms: Sequence[BaseGeometry]) -> List[int]:
        return [self.add(g) for g in geoms]

    def __getitem__(self, shape_id: int) -> BaseGeometry:
        return self._shapes[shape_id]

    def __len__(self) -> int:
        return len(self._shapes)

    def geometries(self, ids: Sequence[int]) -> List[BaseGeometry]:
        return [self._shapes[i] for i in ids]


@dataclass
class Candidate:
    geometry: BaseGeometry
    score: float
    origin: CandidateOrigin
    part_ids: List[int] = field(default_factory=list)
    wing_ids: List[int] = field(default_factory=list)

    @property
    def is_viable(self) -> bool:
        return self.score is not None and not math.isnan(self.score) and self.score > 0


def diverse_order(candidates: Sequence[Candidate]) -> List[Candidate]:
    """Round-robin interleaving of score-ranked origin groups."""
    groups: Dict[Tuple[int, int], List[Tuple[int, Candidate]]] = {}
    for position, cand in enumerate(candidates):
        if not cand.is_viable:
            logger.debug(f"Dropping non-viable candidate from {cand.origin}")
            continue
        groups.setdefault(cand.origin.group_key, []).append((position, cand))

    ranked: List[List[Candidate]] = []
    for key in sorted(groups):
        members = sorted(groups[key],
                         key=lambda pc: (-pc[1].score, pc[1].origin.variant.rank, pc[0]))
        ranked.append([c for _, c in members])

    diverse: List[Candidate] = []
    depth = 0
    while True:
        added = False
        for group in ranked:
            if depth < len(group):
                diverse.append(group[depth])
                added = True
        if not added:
            break
        depth += 1
    return diverse


def select_candidate(candidates: Sequence[Candidate], seed: int) -> Optional[Candidate]:
    """Deterministic pick: diverse_order(candidates)[seed % n], None when empty."""
    diverse = diverse_order(candidates)
    if not diverse:
        return None
    choice = diverse[seed % len(diverse)]
    logger.debug(f"Selected {choice.origin} from {len(diverse)} candidates (seed={seed})")
    return choice
