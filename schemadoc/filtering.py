"""Selecting parts of a schema, and rebuilding its object links."""

from __future__ import annotations

from dataclasses import dataclass, field
from functools import lru_cache
from typing import Iterable, Optional

from schemadoc.codec import KeyStyle, schema_from_dict, schema_to_dict
from schemadoc.schema import Column, Labels, NotFoundError, Relation, Schema, Table

__all__ = [
    "FilterOption",
    "separate_tables",
    "filter_schema",
    "repair",
    "repair_without_viewpoints",
    "clone",
    "clone_without_viewpoints",
]


@dataclass
class FilterOption:
    """Which tables to keep: by name pattern, by label pattern, and how far to reach."""

    include: list[str] = field(default_factory=list)
    exclude: list[str] = field(default_factory=list)
    include_labels: list[str] = field(default_factory=list)
    distance: int = 0


@lru_cache(maxsize=4096)
def _deep_match(text: str, pattern: str) -> bool:
    while pattern:
        head = pattern[0]
        if head == "*":
            return (
                len(pattern) == 1
                or _deep_match(text, pattern[1:])
                or (bool(text) and _deep_match(text[1:], pattern))
            )
        if head == "?":
            if not text:
                return True
        elif not text or text[0] != head:
            return False
        text = text[1:]
        pattern = pattern[1:]
    return not text


def _match_simple(pattern: str, name: str) -> bool:
    """Wildcard match where '*' is any run of characters and '?' any one."""
    if pattern == "":
        return name == ""
    if pattern == "*":
        return True
    return _deep_match(name, pattern)


def _match_length(patterns: Iterable[str], name: str) -> Optional[int]:
    """Length of the literal part of the first pattern matching *name*."""
    for pattern in patterns:
        if _match_simple(pattern, name):
            return len(pattern.replace("*", "").encode("utf-8"))
    return None


def _match_labels(patterns: Iterable[str], labels: Labels) -> bool:
    patterns = list(patterns or ())
    return any(_match_simple(p, label.name) for label in labels for p in patterns)


def _match_table_or_column_labels(patterns: Iterable[str], table: Table) -> bool:
    patterns = list(patterns or ())
    if _match_labels(patterns, table.labels):
        return True
    return any(_match_labels(patterns, column.labels) for column in table.columns)


def separate_tables(
    schema: Schema, option: FilterOption
) -> tuple[list[Table], list[Table]]:
    """Split the schema's tables into those the option keeps and those it drops.

    Raises ValueError when the two parts do not account for every table once.
    """
    include = schema.normalize_table_names(option.include or [])
    exclude = schema.normalize_table_names(option.exclude or [])
    no_selection = not option.include and not option.include_labels

    includes: list[Table] = []
    excludes: list[Table] = []
    for table in schema.tables:
        include_len = _match_length(include, table.name)
        exclude_len = _match_length(exclude, table.name)
        if include_len is not None:
            if exclude_len is not None and include_len < exclude_len:
                excludes.append(table)
            else:
                includes.append(table)
        elif _match_table_or_column_labels(option.include_labels, table) or no_selection:
            (excludes if exclude_len is not None else includes).append(table)
        else:
            excludes.append(table)

    included_names = {t.name for t in includes}
    expanded: list[Table] = []
    for table in includes:
        expanded.append(table)
        related, _ = table.collect_tables_and_relations(option.distance, True)
        expanded.extend(t for t in related if t.name not in included_names)

    expanded_names = {t.name for t in expanded}
    remaining = [t for t in excludes if t.name not in expanded_names]

    if len(schema.tables) != len(expanded) + len(remaining):
        raise ValueError(
            "failed to separate tables. expected: "
            f"{len(schema.tables)}, actual: {len(expanded) + len(remaining)}"
        )
    return expanded, remaining


def _touches(relation: Relation, name: str) -> bool:
    return relation.table.name == name or relation.parent_table.name == name


def _exclude_table(schema: Schema, name: str) -> None:
    for table in schema.tables:
        for column in table.columns:
            column.child_relations = [r for r in column.child_relations if not _touches(r, name)]
            column.parent_relations = [
                r for r in column.parent_relations if not _touches(r, name)
            ]
    schema.tables = [t for t in schema.tables if t.name != name]
    schema.relations = [r for r in schema.relations if not _touches(r, name)]


def filter_schema(schema: Schema, option: FilterOption) -> None:
    """Remove from *schema* every table the option does not keep, with its relations."""
    _, excludes = separate_tables(schema, option)
    for table in excludes:
        _exclude_table(schema, table.name)


def _resolve_referenced(schema: Schema, ref: Table) -> Table:
    try:
        return schema.find_table_by_name(ref.name)
    except NotFoundError:
        ref.external = True
        return ref


def _resolve_columns(
    table: Table, placeholders: list[Column], relation: Relation, parent: bool
) -> list[Column]:
    resolved = []
    for placeholder in placeholders:
        column = table.find_column_by_name(placeholder.name)
        (column.child_relations if parent else column.parent_relations).append(relation)
        resolved.append(column)
    return resolved


def repair_without_viewpoints(schema: Schema) -> None:
    """Point relations and referenced tables at the schema's own objects.

    Raises NotFoundError when a relation names a missing table or column.
    """
    for table in schema.tables:
        table.referenced_tables = [
            _resolve_referenced(schema, ref) for ref in table.referenced_tables
        ]

    for relation in schema.relations:
        try:
            table = schema.find_table_by_name(relation.table.name)
            relation.columns = _resolve_columns(table, relation.columns, relation, False)
            relation.table = table
            parent = schema.find_table_by_name(relation.parent_table.name)
            relation.parent_columns = _resolve_columns(
                parent, relation.parent_columns, relation, True
            )
            relation.parent_table = parent
        except NotFoundError as exc:
            raise NotFoundError(f"failed to repair relation: {exc}") from exc


def repair(schema: Schema) -> None:
    """Repair the schema, then build a filtered schema for every viewpoint."""
    repair_without_viewpoints(schema)
    for viewpoint in schema.viewpoints:
        try:
            view = clone_without_viewpoints(schema)
            filter_schema(
                view,
                FilterOption(
                    include=list(viewpoint.tables),
                    include_labels=list(viewpoint.labels),
                    distance=viewpoint.distance,
                ),
            )
        except (NotFoundError, ValueError) as exc:
            raise type(exc)(f"failed to repair viewpoint: {exc}") from exc
        viewpoint.schema = view


def _copy(schema: Schema) -> Schema:
    return schema_from_dict(schema_to_dict(schema, KeyStyle.JSON), KeyStyle.JSON)


def clone(schema: Schema) -> Schema:
    """A repaired deep copy of *schema*, viewpoints included."""
    copy = _copy(schema)
    repair(copy)
    return copy


def clone_without_viewpoints(schema: Schema) -> Schema:
    """A deep copy of *schema* whose viewpoints carry no filtered schemas."""
    copy = _copy(schema)
    repair_without_viewpoints(copy)
    return copy