"""Bottom-up aggregation of test outcome trees.

Counters on a `TestNode` are derived data. `aggregate` rebuilds a tree with
every counter recomputed from the leaves using an explicit post-order stack,
so deep trees never touch the interpreter recursion limit. The input tree is
left untouched.

A tree must be a tree: every node object may be reached once. A cycle, a node
shared between two parents, duplicate sibling names or a depth beyond the
configured limit raise `StructuralError` naming the offending path.
"""

from __future__ import annotations

import logging
from collections import deque
from typing import Iterator

from passoff.errors import StructuralError
from passoff.models.test_node import TestCounts, TestNode
from passoff.settings import get_settings

log = logging.getLogger("passoff.aggregation")

_SEP = " > "


def _check_children(node: TestNode, path: str) -> None:
    names: set[str] = set()
    for child in node.children:
        if child.name in names:
            raise StructuralError(f"duplicate test name {child.name!r}", path=path)
        names.add(child.name)


def aggregate(root: TestNode, *, max_depth: int | None = None) -> TestNode:
    """Return a copy of ``root`` with every counter recomputed bottom-up.

    Leaves contribute 1 to the main or extra-credit pair depending on their
    category tag; suites contribute the sum over their children. Child order
    is preserved.
    """
    limit = max_depth if max_depth is not None else get_settings().max_tree_depth
    seen: set[int] = set()
    done: dict[int, TestNode] = {}
    stack: list[tuple[TestNode, bool, str, int]] = [(root, False, root.name, 0)]

    while stack:
        node, expanded, path, depth = stack.pop()
        if expanded:
            children = [done.pop(id(c)) for c in node.children]
            counts = node.leaf_counts()
            for child in children:
                counts = counts.plus(child.counts)
            done[id(node)] = node.model_copy(
                update={
                    "children": children,
                    "num_tests_passed": counts.tests_passed,
                    "num_tests_failed": counts.tests_failed,
                    "num_extra_credit_passed": counts.extra_credit_passed,
                    "num_extra_credit_failed": counts.extra_credit_failed,
                }
            )
            continue

        if id(node) in seen:
            raise StructuralError("test node reached more than once (cycle or shared node)", path=path)
        seen.add(id(node))
        if depth > limit:
            raise StructuralError(f"test tree deeper than {limit} levels", path=path)
        _check_children(node, path)

        stack.append((node, True, path, depth))
        for child in reversed(node.children):
            stack.append((child, False, f"{path}{_SEP}{child.name}", depth + 1))

    result = done[id(root)]
    log.debug("aggregated %r: %s", root.name, tuple(result.counts))
    return result


def iter_leaves(root: TestNode) -> Iterator[TestNode]:
    """Yield leaves in declaration order."""
    stack = [root]
    while stack:
        node = stack.pop()
        if node.is_leaf:
            yield node
        stack.extend(reversed(node.children))


def recount(root: TestNode) -> TestCounts:
    """Count leaves directly, ignoring every stored counter."""
    counts = TestCounts()
    for leaf in iter_leaves(root):
        counts = counts.plus(leaf.leaf_counts())
    return counts


def extra_credit_counts(root: TestNode) -> dict[str, tuple[int, int]]:
    """``(passed, run)`` extra-credit counts per extra-credit category.

    Expects an aggregated tree. The search stops at the top-most node carrying
    a category; its counters already cover everything below it.
    """
    counts: dict[str, tuple[int, int]] = {}
    queue = deque([root])
    while queue:
        node = queue.popleft()
        if node.ec_category:
            passed, run = counts.get(node.ec_category, (0, 0))
            counts[node.ec_category] = (
                passed + node.num_extra_credit_passed,
                run + node.counts.extra_credit_run,
            )
            continue
        queue.extend(node.children)
    return counts


def extra_credit_scores(root: TestNode) -> dict[str, float]:
    """Fraction of extra-credit tests passed, per extra-credit category."""
    return {
        cat: (passed / run if run else 0.0)
        for cat, (passed, run) in extra_credit_counts(root).items()
    }
