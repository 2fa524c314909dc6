"""Course-category → study-year hierarchy with rolled-up condition counters.

Every non-leaf node's metadata is the sum of its children's, all the way to
the root, so ``root.metadata.total`` is the number of records placed in the
tree.  Records whose course matches no category are left out (not an error).
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable, Sequence
from functools import reduce

from surveygraph.analysis.models import TreeMetadata, TreeNode
from surveygraph.models import DEFAULT_CATEGORIES, CategoryDefinition, SurveyRecord
from surveygraph.normalize import normalize_year

logger = logging.getLogger(__name__)

ROOT_NAME = "All Students"

_DIGITS_RE = re.compile(r"\d+", re.ASCII)


def match_category(
    course: str,
    categories: Sequence[CategoryDefinition] = DEFAULT_CATEGORIES,
) -> CategoryDefinition | None:
    """Category whose keyword occurs in *course* (case-insensitive).

    When keywords from several categories match, the longest matching
    keyword wins; equal lengths go to the earlier definition.
    """
    text = course.strip().lower()
    if not text:
        return None
    best: CategoryDefinition | None = None
    best_len = 0
    for category in categories:
        for keyword in category.keywords:
            kw = keyword.strip().lower()
            if kw and kw in text and len(kw) > best_len:
                best, best_len = category, len(kw)
    return best


def _year_sort_key(name: str) -> tuple[int, int, str, str]:
    # Numeric order for digit runs of any length: shorter first, then by text.
    match = _DIGITS_RE.search(name)
    if match is None:
        return (1, 0, "", name)
    digits = match.group().lstrip("0") or "0"
    return (0, len(digits), digits, name)


def _year_nodes(records: Iterable[SurveyRecord]) -> tuple[TreeNode, ...]:
    groups: dict[str, TreeMetadata] = {}
    for record in records:
        year = normalize_year(record.year_of_study).strip()
        if not year:
            continue
        groups[year] = groups.get(year, TreeMetadata()).with_record(record)
    return tuple(
        TreeNode(name=name, metadata=groups[name])
        for name in sorted(groups, key=_year_sort_key)
    )


def _rolled_up(name: str, children: tuple[TreeNode, ...]) -> TreeNode:
    metadata = reduce(lambda acc, child: acc + child.metadata, children, TreeMetadata())
    return TreeNode(name=name, metadata=metadata, children=children)


def build_category_node(
    records: Iterable[SurveyRecord],
    category: CategoryDefinition,
    categories: Sequence[CategoryDefinition] | None = None,
) -> TreeNode:
    """Subtree for one category: a child per study year.

    With *categories* given, a record only counts here if this is the
    category it is assigned to among them (so per-category views agree with
    the full tree).  Without it, any keyword match counts.
    """
    pool = categories if categories is not None else (category,)
    matched = [r for r in records if match_category(r.course, pool) == category]
    return _rolled_up(category.name, _year_nodes(matched))


def build_tree(
    records: Iterable[SurveyRecord],
    categories: Sequence[CategoryDefinition] = DEFAULT_CATEGORIES,
    root_name: str = ROOT_NAME,
) -> TreeNode:
    """Root → category → year tree.  Empty categories are omitted."""
    buckets: dict[str, list[SurveyRecord]] = {c.name: [] for c in categories}
    unmatched = 0
    for record in records:
        category = match_category(record.course, categories)
        if category is None:
            unmatched += 1
            continue
        buckets[category.name].append(record)

    if unmatched:
        logger.debug("build_tree: %d record(s) matched no category", unmatched)

    children = tuple(
        node
        for node in (_rolled_up(c.name, _year_nodes(buckets[c.name])) for c in categories)
        if node.metadata.total > 0
    )
    return _rolled_up(root_name, children)
