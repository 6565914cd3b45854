"""Quadtree spatial index over bounded entities.

Each node covers a rectangle and stores the entries whose bounding box does
not fit inside exactly one of its four quadrants. An entry descends into a
quadrant only while the box fits that quadrant alone and the quadrant's side
stays at or above the minimum region size. Entries are never split and the
tree is never rebalanced; children are created lazily, so sparse regions cost
nothing.

Queries:
- query_overlapping: all payloads whose box meets a query box
- query_nearest_to_ray: the payload with the smallest valuation among
  entries whose box boundary meets an infinite 2-D line. The minimum is
  folded during descent, and subtrees whose rectangle the line misses are
  pruned.

The index only holds references: callers keep the point and section lists.
It is built once per route version and never mutated afterwards.
"""

import logging
from dataclasses import dataclass
from math import inf
from typing import Callable, Generic, Iterator, Optional, Sequence, TypeVar

from route_planner.constants import IndexConfig
from route_planner.model.bounding_box import Axis2D, BoundingBox2D
from route_planner.model.road_section import RoadSection
from route_planner.model.track_point import EnrichedPoint

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class IndexEntry(Generic[T]):
    """A payload stored with its bounding box."""

    box: BoundingBox2D
    payload: T


class SpatialIndex(Generic[T]):
    """A quadtree node; the root node is the index.

    Attributes:
        bounds: Rectangle covered by this node
        min_region_m: Quadrants smaller than this are not created
        entries: Entries stored at this node

    Example:
        index = SpatialIndex(bounds=BoundingBox2D(0, 0, 40, 40))
        index.insert(box=BoundingBox2D.around_point(5, 5, padding=1), payload="a")
        index.query_overlapping(box=BoundingBox2D(0, 0, 10, 10))  # ["a"]
    """

    def __init__(self, bounds: BoundingBox2D, min_region_m: float = IndexConfig.MIN_REGION_SIZE_M):
        self.bounds = bounds
        self.min_region_m = min_region_m
        self.entries: list[IndexEntry[T]] = []
        self._quadrants = bounds.quadrants()
        self._children: list[Optional["SpatialIndex[T]"]] = [None, None, None, None]

    @property
    def northwest(self) -> Optional["SpatialIndex[T]"]:
        return self._children[0]

    @property
    def northeast(self) -> Optional["SpatialIndex[T]"]:
        return self._children[1]

    @property
    def southeast(self) -> Optional["SpatialIndex[T]"]:
        return self._children[2]

    @property
    def southwest(self) -> Optional["SpatialIndex[T]"]:
        return self._children[3]

    @property
    def children(self) -> list["SpatialIndex[T]"]:
        """Existing child nodes in (northwest, northeast, southeast, southwest) order."""
        return [child for child in self._children if child is not None]

    def insert(self, box: BoundingBox2D, payload: T) -> None:
        """Store payload at the deepest node whose single quadrant fits box.

        BoundingBox2D refuses non-finite coordinates, so every box reaching
        here is finite.

        Raises:
            ValueError: If box is not inside this node's bounds
        """
        if not self.bounds.contains(box):
            raise ValueError(f"{box} lies outside index bounds {self.bounds}")
        node: SpatialIndex[T] = self
        while True:
            slot = node._fitting_quadrant(box=box)
            if slot is None:
                node.entries.append(IndexEntry(box=box, payload=payload))
                return
            child = node._children[slot]
            if child is None:
                child = SpatialIndex(bounds=node._quadrants[slot], min_region_m=node.min_region_m)
                node._children[slot] = child
            node = child

    def query_overlapping(self, box: BoundingBox2D) -> list[T]:
        """Payloads whose bounding box intersects box (order unspecified)."""
        results = [entry.payload for entry in self.entries if entry.box.intersects(box)]
        for child in self.children:
            if child.bounds.intersects(box):
                results.extend(child.query_overlapping(box=box))
        return results

    def query_nearest_to_ray(self, ray: Axis2D, valuation: Callable[[T], float]) -> Optional[T]:
        """Payload with the lowest valuation among entries whose box boundary meets ray.

        On equal valuations the first one met wins: local entries before
        children, children in northwest, northeast, southeast, southwest order.

        Args:
            ray: Infinite line in the index plane
            valuation: Score to minimise (e.g. distance to the unprojected ray)

        Returns:
            The minimising payload, or None if no entry box meets the line.
        """
        best = self._nearest(ray=ray, valuation=valuation)
        return best[1] if best is not None else None

    def _nearest(self, ray: Axis2D, valuation: Callable[[T], float]) -> Optional[tuple[float, T]]:
        if not self.bounds.boundary_intersects(ray):
            return None

        best: Optional[tuple[float, T]] = None
        best_value = inf
        for entry in self.entries:
            if entry.box.boundary_intersects(ray):
                value = valuation(entry.payload)
                if best is None or value < best_value:
                    best, best_value = (value, entry.payload), value

        for child in self.children:
            candidate = child._nearest(ray=ray, valuation=valuation)
            if candidate is not None and (best is None or candidate[0] < best_value):
                best, best_value = candidate, candidate[0]
        return best

    def _fitting_quadrant(self, box: BoundingBox2D) -> Optional[int]:
        """Slot of the only quadrant containing box, None if it must stay here."""
        if self._quadrants[0].side < self.min_region_m:
            return None
        fitting = [slot for slot, quadrant in enumerate(self._quadrants) if quadrant.contains(box)]
        return fitting[0] if len(fitting) == 1 else None

    def iter_nodes(self) -> Iterator["SpatialIndex[T]"]:
        """All nodes, depth first, starting with this one."""
        yield self
        for child in self.children:
            yield from child.iter_nodes()

    @property
    def depth(self) -> int:
        """Number of levels below this node (0 for a node without children)."""
        return max((child.depth + 1 for child in self.children), default=0)

    def __len__(self) -> int:
        return sum(len(node.entries) for node in self.iter_nodes())

    def __repr__(self) -> str:
        return f"SpatialIndex({len(self)} entries, depth={self.depth}, side={self.bounds.side:.0f}m)"


def build_index(
    boxes: Sequence[BoundingBox2D],
    payloads: Sequence[T],
    min_region_m: float = IndexConfig.MIN_REGION_SIZE_M,
) -> SpatialIndex[T]:
    """Build an index whose square root region covers all boxes.

    Args:
        boxes: One bounding box per payload
        payloads: Values to store (references, not copies)
        min_region_m: Minimum quadrant side length

    Returns:
        Populated root node. An empty input gives an empty index.
    """
    if len(boxes) != len(payloads):
        raise ValueError(f"Got {len(boxes)} boxes for {len(payloads)} payloads")
    if boxes:
        covering = BoundingBox2D.covering(boxes)
        # Centre-and-half rounding can shave an ulp off the square
        bounds = BoundingBox2D.covering([covering, covering.squared(min_side=min_region_m)])
    else:
        bounds = BoundingBox2D.around_point(0.0, 0.0, padding=min_region_m / 2)

    index: SpatialIndex[T] = SpatialIndex(bounds=bounds, min_region_m=min_region_m)
    for box, payload in zip(boxes, payloads):
        index.insert(box=box, payload=payload)
    logger.info(f"Built {index!r}")
    return index


def build_point_index(
    points: Sequence[EnrichedPoint],
    padding_m: float = IndexConfig.POINT_BOX_PADDING_M,
    min_region_m: float = IndexConfig.MIN_REGION_SIZE_M,
) -> SpatialIndex[EnrichedPoint]:
    """Index track points, each boxed by padding_m on every side."""
    boxes = [BoundingBox2D.around_point(p.position.x, p.position.y, padding=padding_m) for p in points]
    return build_index(boxes=boxes, payloads=points, min_region_m=min_region_m)


def build_section_index(
    sections: Sequence[RoadSection],
    min_region_m: float = IndexConfig.MIN_REGION_SIZE_M,
) -> SpatialIndex[RoadSection]:
    """Index road sections by the plan-view box of their endpoints."""
    boxes = [section.bounding_box for section in sections]
    return build_index(boxes=boxes, payloads=sections, min_region_m=min_region_m)
