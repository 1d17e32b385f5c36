from jaxtyping import Float

from numpy import ndarray
import numpy as np

from .vector import point_to_segment_distance

class BezierCurve:
    def __init__(self, p: Float[ndarray, "2 N"]):
        assert p.shape[1] > 0
        self.p = p
    
    def __repr__(self):
        return f"{self.__class__.__name__}({repr(self.p)})"

    def split_at(self, t: float) -> tuple["BezierCurve", "BezierCurve"]:
        assert 0 <= t <= 1
        p, left, right = self.p, [], []
        while True:
            left.append(p[:,0])
            right.append(p[:,-1])
            if p.shape[1] == 1:
                break
            p = (1-t) * p[:,:-1] + t * p[:,1:]
        # `right` is collected from the far end, restore start -> end order
        return BezierCurve(np.array(left).T), BezierCurve(np.array(right[::-1]).T)

    def is_flat(self, tolerance: float) -> bool:
        """true if every inner control point lies within `tolerance` of the chord"""
        start, end = self.p[:,0], self.p[:,-1]
        return all(
            point_to_segment_distance(q, start, end) <= tolerance
            for q in self.p[:,1:-1].T
        )

    def flatten(self, tolerance: float, max_depth: int = 16) -> Float[ndarray, "_ 2"]:
        """
        approximate the curve with a polyline by recursive subdivision at t=.5
        until every piece is within `tolerance` of its chord
        """
        points = [self.p[:,0]]
        stack: list[tuple[BezierCurve, int]] = [(self, 0)]
        while len(stack):
            curve, depth = stack.pop()
            if depth >= max_depth or curve.is_flat(tolerance):
                points.append(curve.p[:,-1])
                continue
            left, right = curve.split_at(.5)
            # right is pushed first so that left is emitted first
            stack.append((right, depth+1))
            stack.append((left, depth+1))
        return np.array(points, dtype=float)
