"""Removal of self-intersections from assembled buffer rings.

A ring built by concatenating offsets crosses itself wherever the original
curve turns concavely sharper than the buffer distance allows. Resolution:

1. Cut every element of the ring at its intersections with the others
2. Discard the pieces whose midpoint lies strictly inside the buffer (the
   overshoot loops)
3. Chain the surviving pieces end to start into closed loops

For a plain curve, inside the buffer means closer than |d| - eps to the
original curve. Tagged elements from BufferAssembler also carry their joins
and caps, and the buffer is then the union of the bands swept by the normals
of the original pieces with the areas those joins and caps add. Bevels cut
corners closer than |d| to the vertex and butt caps pass through the
extremity itself, so they survive this test where the distance test would
drop them.

If every piece is discarded, the side is empty. This is a valid outcome,
for example the inner side of a ring thinner than twice the distance.
"""

import logging
from collections.abc import Sequence

import structlog

from curvebuffer.core.assembler import Joint, PieceOrigin, RingPiece
from curvebuffer.core.geometry import band_covers, joint_covers
from curvebuffer.domain import Curve, Element, PolyCurve, element_intersections, smooth_pieces
from curvebuffer.exceptions import OpenBoundaryError

logger = structlog.wrap_logger(logging.getLogger(__name__))


class SelfIntersectionResolver:
    """Splits a ring at its self-intersections and keeps the valid loops.

    Example:
        resolver = SelfIntersectionResolver(tolerance=1e-6)
        loops = resolver.resolve(ring, original_curve, 10.0)
    """

    def __init__(self, tolerance: float = 1e-6) -> None:
        """Initialize resolver.

        Args:
            tolerance: Slack on the distance test, and threshold under which
                points are merged and pieces or loops are dropped
        """
        self.tolerance = tolerance

    def resolve(
        self, ring: PolyCurve | Sequence[RingPiece], curve: Curve, distance: float
    ) -> list[PolyCurve]:
        """Resolve the self-intersections of a closed ring.

        Args:
            ring: Closed offset curve to clean, or the tagged elements of one
                or several rings from BufferAssembler
            curve: Original curve the ring was built from
            distance: Buffer distance

        Returns:
            Closed, simple loops; empty when nothing survives

        Raises:
            OpenBoundaryError: If the surviving pieces cannot be chained
                into closed loops
        """
        distance = abs(distance)
        joints: list[Joint] | None = None
        if isinstance(ring, PolyCurve):
            ring = [RingPiece(e, PieceOrigin.OFFSET) for e in smooth_pieces(ring)]
        else:
            joints = list(dict.fromkeys(p.joint for p in ring if p.joint is not None))
        tagged = [piece for piece in ring if piece.element.length() > self.tolerance]
        if not tagged:
            return []

        cuts = self._find_cuts([piece.element for piece in tagged])
        pieces = self._split(tagged, cuts)

        originals = smooth_pieces(curve)
        kept = [
            not self._is_covered(piece.element, curve, originals, joints, distance)
            for piece in pieces
        ]

        runs = self._group_runs([piece.element for piece in pieces], kept)
        loops = self._chain_runs(runs)
        loops = [loop for loop in loops if loop.length() > self.tolerance]

        logger.debug(
            "Ring resolved",
            elements=len(tagged),
            cut_points=sum(len(c) for c in cuts) - 2 * len(cuts),
            pieces=len(pieces),
            discarded=kept.count(False),
            loops=len(loops),
        )
        return loops

    def _is_covered(
        self,
        element: Element,
        curve: Curve,
        originals: list[Element],
        joints: list[Joint] | None,
        distance: float,
    ) -> bool:
        """Check whether the middle of a piece lies strictly inside the buffer.

        Without joints, the buffer is the set of points closer than the
        distance to the curve. With joints, it is the union of the bands
        around the original pieces and of the areas added by joins and caps.
        """
        middle = element.point((element.t0 + element.t1) / 2.0)
        if joints is None:
            return curve.distance(middle) < distance - self.tolerance
        return any(
            band_covers(original, middle, distance, self.tolerance) for original in originals
        ) or any(
            joint_covers(joint.anchor, joint.elements, middle, self.tolerance) for joint in joints
        )

    def _find_cuts(self, elements: list[Element]) -> list[list[float]]:
        """Parameters at which each element must be split."""
        n = len(elements)
        cuts: list[list[float]] = [[e.t0, e.t1] for e in elements]

        for i in range(n):
            for j in range(i + 1, n):
                first, second = elements[i], elements[j]
                # Consecutive elements always meet at their shared extremity
                shared = []
                if j == i + 1:
                    shared.append(first.last_point)
                if i == 0 and j == n - 1:
                    shared.append(second.last_point)

                for s, u in element_intersections(first, second):
                    hit = first.point(s)
                    if any(hit.almost_equals(p, self.tolerance) for p in shared):
                        continue
                    cuts[i].append(s)
                    cuts[j].append(u)

        return cuts

    def _split(self, tagged: list[RingPiece], cuts: list[list[float]]) -> list[RingPiece]:
        pieces: list[RingPiece] = []
        for piece, params in zip(tagged, cuts):
            element = piece.element
            params = sorted(params)
            start = params[0]
            for t in params[1:]:
                # Slivers are absorbed by the following piece
                sub = element.sub_curve(start, t)
                if sub.length() <= self.tolerance:
                    continue
                pieces.append(RingPiece(sub, piece.origin, piece.joint))
                start = t
        return pieces

    def _group_runs(self, pieces: list[Element], kept: list[bool]) -> list[list[Element]]:
        """Group kept pieces into maximal continuous runs, wrapping around."""
        runs: list[list[Element]] = []
        current: list[Element] = []
        for element, keep in zip(pieces, kept):
            if keep and current and current[-1].last_point.almost_equals(
                element.first_point, self.tolerance
            ):
                current.append(element)
                continue
            if current:
                runs.append(current)
            current = [element] if keep else []
        if current:
            runs.append(current)

        # The ring is closed: the last run may continue into the first one
        if (
            len(runs) > 1
            and kept[0]
            and kept[-1]
            and runs[-1][-1].last_point.almost_equals(runs[0][0].first_point, self.tolerance)
        ):
            runs[0] = runs.pop() + runs[0]
        return runs

    def _chain_runs(self, runs: list[list[Element]]) -> list[PolyCurve]:
        """Chain runs end to start into closed loops, by nearest start point."""
        remaining = list(runs)
        loops: list[PolyCurve] = []
        while remaining:
            loop = remaining.pop(0)
            while remaining:
                end = loop[-1].last_point
                closing_gap = end.distance(loop[0].first_point)
                nearest = min(
                    range(len(remaining)),
                    key=lambda k: end.distance(remaining[k][0].first_point),
                )
                if closing_gap <= end.distance(remaining[nearest][0].first_point):
                    break
                loop = loop + remaining.pop(nearest)

            start, end = loop[0].first_point, loop[-1].last_point
            if not end.almost_equals(start, self.tolerance):
                logger.warning(
                    "Boundary loop left open",
                    start=start.to_tuple(),
                    end=end.to_tuple(),
                    gap=end.distance(start),
                )
                raise OpenBoundaryError(start, end)
            loops.append(PolyCurve(tuple(loop), closed=True))
        return loops
