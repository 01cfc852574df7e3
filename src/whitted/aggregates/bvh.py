"""Automatic bounding-volume hierarchy.

The hierarchy is built incrementally: each object is inserted under the node
that minimises the increase of a probabilistic cost model, found with a
branch-and-bound search over the current tree. Attaching under a leaf first
demotes it to an internal node, and the search charges for that. Internal
nodes may have any number of children, so the tree shape depends on insertion
order.

Cost model (per node):
    ec    external cost: 1 for an internal node (a box test), the object's
          ``cost()`` for a leaf
    sa    surface area of the node's box
    sec   sum of the children's ``ec``
    saic  sum of the children's ``aic``
    aic   adjusted internal cost, ``sa * sec + saic`` (0 for a leaf)

A ray that hits the root box costs ``1 + root.aic / root.sa`` on average,
since a child box is hit with probability proportional to its surface area.

Nodes live in a flat list and refer to each other by index (``NIL`` for
none). Queries walk the tree with an explicit cursor: first child, else next
sibling, else climb to the nearest ancestor with a sibling.

Example:
    >>> from src.whitted.aggregates.bvh import BVH
    >>> from src.whitted.geometry.sphere import Sphere
    >>> bvh = BVH()
    >>> for i in range(8):
    ...     bvh.add_child(Sphere((2.0 * i, 0, 0), 0.5))
    >>> bvh.close()
    >>> bvh.leaf_count
    8
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterator

from src.whitted.core.aabb import AABB
from src.whitted.core.interval import Interval
from src.whitted.core.ray import Hit, Ray
from src.whitted.core.vector import INFINITY, Vec3
from src.whitted.geometry.base import Aggregate, SceneObject

logger = logging.getLogger(__name__)

NIL = -1


@dataclass(eq=False)
class _Node:
    bbox: AABB
    obj: SceneObject | None = None
    ec: float = 1.0
    sa: float = 0.0
    aic: float = 0.0
    sec: float = 0.0
    saic: float = 0.0
    parent: int = NIL
    sibling: int = NIL
    child: int = NIL

    @property
    def is_leaf(self) -> bool:
        return self.child == NIL


class BVH(Aggregate):
    """Aggregate backed by an automatically built bounding-volume hierarchy.

    Children added before ``close()`` are inserted when it is called, in the
    order they were added; children added afterwards are inserted at once.
    """

    plugin_name = "abvh"

    def __init__(self) -> None:
        super().__init__()
        self.nodes: list[_Node] = []
        self.root: int = NIL
        self._max_leaf_cost = 1.0

    # =========================================================================
    # Construction
    # =========================================================================

    def add_child(self, obj: SceneObject) -> None:
        super().add_child(obj)
        if self.closed:
            self.insert(obj)

    def close(self) -> None:
        if self.closed:
            return
        for obj in self.children:
            self.insert(obj)
        super().close()
        logger.debug(
            "BVH %d closed: %d leaves, %d nodes, depth %d, cost %.3f",
            self.uid,
            self.leaf_count,
            self.node_count,
            self.depth(),
            self.cost(),
        )

    def insert(self, obj: SceneObject) -> int:
        """Insert ``obj`` as a new leaf and return the leaf's node index."""
        box = obj.bounding_box()
        leaf = self._new_node(_Node(bbox=box, obj=obj, ec=obj.cost(), sa=box.surface_area))
        if self.root == NIL:
            self.root = leaf
            self._max_leaf_cost = self.nodes[leaf].ec
            return leaf

        new = self.nodes[leaf]
        # Demoting a leaf of cost c under a parent of area A saves at most (c - 1) * A
        root_area = self.nodes[self.root].bbox.union(box).surface_area
        slack = max(0.0, self._max_leaf_cost - 1.0) * root_area
        found = self._branch_and_bound(self.root, new, INFINITY, 0.0, slack)
        # The root always accepts a child when the bound is infinite
        parent = found[1] if found is not None else self.root
        self._attach(parent, leaf)
        self._max_leaf_cost = max(self._max_leaf_cost, new.ec)
        return leaf

    def _new_node(self, node: _Node) -> int:
        self.nodes.append(node)
        return len(self.nodes) - 1

    @staticmethod
    def _child_cost_sum(node: _Node) -> float:
        # A leaf that receives a child keeps its object as its only child
        return node.ec if node.is_leaf else node.sec

    def _branch_and_bound(
        self, index: int, new: _Node, bound: float, parent_area: float, slack: float
    ) -> tuple[float, int] | None:
        """Search the subtree at ``index`` for a parent cheaper than ``bound``.

        Costs are increases of the AIC of the parent of ``index``, so attaching
        under a leaf also pays for its demotion: the leaf gains ``sa * ec`` of
        internal cost and its parent's ``sec`` changes by ``1 - ec``.

        Args:
            index: Root of the subtree to search.
            new: The leaf being inserted.
            bound: Cost increase to beat.
            parent_area: Surface area of the parent of ``index`` after it
                grows to hold ``new`` (0 for the tree root).
            slack: Upper bound on the cost any single demotion can save.

        Returns:
            ``(cost increase, parent index)`` for the best parent found in the
            subtree, or None if nothing beats ``bound``.
        """
        node = self.nodes[index]
        grown = node.bbox.union(new.bbox)
        new_area = grown.surface_area if grown != node.bbox else node.sa
        # Growing this box makes every existing child more likely to be tested
        area_delta = (new_area - node.sa) * self._child_cost_sum(node)
        child_bound = bound - area_delta
        insert_delta = new_area * new.ec + new.aic

        if node.is_leaf:
            insert_delta += node.sa * node.ec + (1.0 - node.ec) * parent_area
            if insert_delta < child_bound:
                return insert_delta + area_delta, index
            return None

        if child_bound + slack <= 0.0:
            return None

        best = NIL
        if insert_delta < child_bound:
            child_bound = insert_delta
            best = index

        child = node.child
        while child != NIL:
            found = self._branch_and_bound(child, new, child_bound, new_area, slack)
            if found is not None:
                child_bound, best = found
            child = self.nodes[child].sibling

        if best == NIL:
            return None
        return child_bound + area_delta, best

    def _demote(self, index: int) -> None:
        """Turn leaf ``index`` into an internal node holding a copy of itself."""
        node = self.nodes[index]
        old_ec, old_aic = node.ec, node.aic
        leaf = self._new_node(
            _Node(bbox=node.bbox, obj=node.obj, ec=node.ec, sa=node.sa, parent=index)
        )
        node.obj = None
        node.child = leaf
        node.ec = 1.0
        node.sec = old_ec
        node.saic = 0.0
        node.aic = node.sa * node.sec

        parent = node.parent
        if parent == NIL:
            return
        above = self.nodes[parent]
        above.sec += node.ec - old_ec
        above.saic += node.aic - old_aic
        before = above.aic
        above.aic = above.sa * above.sec + above.saic
        self._propagate(above.parent, above.aic - before)

    def _attach(self, index: int, leaf: int) -> None:
        """Link ``leaf`` under node ``index`` and update boxes and costs upward."""
        if self.nodes[index].is_leaf:
            self._demote(index)

        node = self.nodes[index]
        new = self.nodes[leaf]
        new.parent = index
        new.sibling = node.child
        node.child = leaf

        node.sec += new.ec
        node.saic += new.aic
        grown = node.bbox.union(new.bbox)
        expanded = grown != node.bbox
        if expanded:
            node.bbox = grown
            node.sa = grown.surface_area
        before = node.aic
        node.aic = node.sa * node.sec + node.saic
        increment = node.aic - before

        # Phase 1: ancestors whose boxes grow
        index = node.parent
        while expanded and index != NIL:
            above = self.nodes[index]
            grown = above.bbox.union(new.bbox)
            if grown == above.bbox:
                break
            above.bbox = grown
            above.sa = grown.surface_area
            above.saic += increment
            before = above.aic
            above.aic = above.sa * above.sec + above.saic
            increment = above.aic - before
            index = above.parent

        # Phase 2: only the children's internal costs changed
        self._propagate(index, increment)

    def _propagate(self, index: int, increment: float) -> None:
        while index != NIL:
            node = self.nodes[index]
            node.saic += increment
            node.aic += increment
            index = node.parent

    # =========================================================================
    # Queries
    # =========================================================================

    def _skip(self, index: int) -> int:
        """Next node after the subtree rooted at ``index`` in depth-first order."""
        while index != NIL:
            node = self.nodes[index]
            if node.sibling != NIL:
                return node.sibling
            index = node.parent
        return NIL

    def _leaves(self) -> Iterator[_Node]:
        index = self.root
        while index != NIL:
            node = self.nodes[index]
            if node.is_leaf:
                yield node
                index = self._skip(index)
            else:
                index = node.child

    def intersect(
        self, ray: Ray, limit: float = INFINITY, ignore: int | None = None
    ) -> Hit | None:
        nearest = None
        nodes = self.nodes
        index = self.root
        while index != NIL:
            node = nodes[index]
            if node.is_leaf:
                if node.obj.uid != ignore:
                    hit = node.obj.intersect(ray, limit, ignore)
                    if hit is not None:
                        nearest = hit
                        limit = hit.distance
                index = self._skip(index)
            elif node.bbox.hit(ray, limit):
                index = node.child
            else:
                index = self._skip(index)
        return nearest

    def inside(self, point: Vec3) -> bool:
        return any(leaf.obj.inside(point) for leaf in self._leaves())

    def directional_bound(self, direction: Vec3) -> Interval:
        bound = Interval.empty()
        for leaf in self._leaves():
            bound = bound.union(leaf.obj.directional_bound(direction))
        return bound

    def bounding_box(self) -> AABB:
        if self.root == NIL:
            return AABB.empty()
        return self.nodes[self.root].bbox

    def cost(self) -> float:
        if self.root == NIL:
            return 1.0
        root = self.nodes[self.root]
        if root.is_leaf:
            return root.ec
        if root.sa <= 0.0:
            return 1.0 + root.sec
        return 1.0 + root.aic / root.sa

    # =========================================================================
    # Diagnostics
    # =========================================================================

    @property
    def node_count(self) -> int:
        return len(self.nodes)

    @property
    def leaf_count(self) -> int:
        return sum(1 for _ in self._leaves())

    @property
    def root_box(self) -> AABB:
        return self.bounding_box()

    def depth(self) -> int:
        """Number of levels in the tree (0 when empty, 1 for a single leaf)."""
        if self.root == NIL:
            return 0
        deepest = 0
        stack = [(self.root, 1)]
        while stack:
            index, level = stack.pop()
            deepest = max(deepest, level)
            child = self.nodes[index].child
            while child != NIL:
                stack.append((child, level + 1))
                child = self.nodes[child].sibling
        return deepest

    def children_of(self, index: int) -> list[int]:
        result = []
        child = self.nodes[index].child
        while child != NIL:
            result.append(child)
            child = self.nodes[child].sibling
        return result

    def check_invariants(self, rel_tol: float = 1e-9) -> bool:
        """Verify box tightness, cost bookkeeping and link consistency.

        Raises:
            AssertionError: Describing the first violated invariant.
        """
        if self.root == NIL:
            return True
        assert self.nodes[self.root].parent == NIL, "root has a parent"

        for index, node in enumerate(self.nodes):
            if node.is_leaf:
                assert node.obj is not None, f"leaf {index} has no object"
                assert node.aic == 0.0, f"leaf {index} has internal cost"
                continue

            assert node.obj is None, f"internal node {index} holds an object"
            children = [self.nodes[c] for c in self.children_of(index)]
            box = AABB.empty()
            for child in children:
                assert child.parent == index, f"child of {index} has wrong parent"
                box = box.union(child.bbox)
            assert box == node.bbox, f"box of node {index} is not tight"

            sec = sum(child.ec for child in children)
            saic = sum(child.aic for child in children)
            tol = rel_tol * max(1.0, abs(node.aic))
            assert abs(node.sec - sec) <= tol, f"sec of node {index} is stale"
            assert abs(node.saic - saic) <= tol, f"saic of node {index} is stale"
            assert abs(node.aic - (node.sa * node.sec + node.saic)) <= tol, (
                f"aic of node {index} is inconsistent"
            )
        return True
