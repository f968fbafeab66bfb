"""Data model of a documented database schema."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Optional

from schemadoc.cardinality import Cardinality

__all__ = [
    "TYPE_FK",
    "COLUMN_EXTRA_DEF",
    "COLUMN_OCCURRENCES",
    "COLUMN_PERCENTS",
    "COLUMN_CHILDREN",
    "COLUMN_PARENTS",
    "COLUMN_COMMENT",
    "COLUMN_LABELS",
    "DEFAULT_HIDE_COLUMNS",
    "HIDEABLE_COLUMNS",
    "NotFoundError",
    "Label",
    "Labels",
    "ViewpointGroup",
    "Viewpoint",
    "Viewpoints",
    "Index",
    "Constraint",
    "Trigger",
    "Column",
    "Table",
    "Relation",
    "DriverMeta",
    "Function",
    "Driver",
    "Schema",
]

TYPE_FK = "FOREIGN KEY"

COLUMN_EXTRA_DEF = "ExtraDef"
COLUMN_OCCURRENCES = "Occurrences"
COLUMN_PERCENTS = "Percents"
COLUMN_CHILDREN = "Children"
COLUMN_PARENTS = "Parents"
COLUMN_COMMENT = "Comment"
COLUMN_LABELS = "Labels"

DEFAULT_HIDE_COLUMNS = (COLUMN_EXTRA_DEF, COLUMN_OCCURRENCES, COLUMN_PERCENTS, COLUMN_LABELS)
HIDEABLE_COLUMNS = (
    COLUMN_EXTRA_DEF,
    COLUMN_OCCURRENCES,
    COLUMN_PERCENTS,
    COLUMN_CHILDREN,
    COLUMN_PARENTS,
    COLUMN_COMMENT,
    COLUMN_LABELS,
)


class NotFoundError(LookupError):
    """A table, column, index, constraint, trigger or relation is missing."""


@dataclass
class Label:
    name: str
    virtual: bool = False


class Labels(list):
    """A list of labels with name-based lookup."""

    def merge(self, name: str) -> Labels:
        """Return these labels with a virtual label *name* added if absent."""
        if self.contains(name):
            return self
        return Labels([*self, Label(name=name, virtual=True)])

    def contains(self, name: str) -> bool:
        return any(label.name == name for label in self)


@dataclass
class ViewpointGroup:
    name: str = ""
    desc: str = ""
    labels: list[str] = field(default_factory=list)
    tables: list[str] = field(default_factory=list)
    color: str = ""


@dataclass
class Viewpoint:
    name: str = ""
    desc: str = ""
    labels: list[str] = field(default_factory=list)
    tables: list[str] = field(default_factory=list)
    distance: int = 0
    groups: list[ViewpointGroup] = field(default_factory=list)
    schema: Optional[Schema] = field(default=None, compare=False, repr=False)


def _same_elements(a: Optional[list[str]], b: Optional[list[str]]) -> bool:
    a = a or []
    b = b or []
    return len(a) == len(b) and all(item in a for item in b)


class Viewpoints(list):
    """A list of viewpoints that merges by content or name."""

    def merge(self, viewpoint: Viewpoint) -> Viewpoints:
        """Replace a matching viewpoint with *viewpoint*, or append it."""
        for i, existing in enumerate(self):
            if _same_elements(existing.labels, viewpoint.labels) and _same_elements(
                existing.tables, viewpoint.tables
            ):
                self[i] = viewpoint
                return self
            if existing.name == viewpoint.name:
                self[i] = viewpoint
                return self
        self.append(viewpoint)
        return self


@dataclass
class Index:
    name: str = ""
    definition: str = ""
    table: Optional[str] = None
    columns: list[str] = field(default_factory=list)
    comment: str = ""


@dataclass
class Constraint:
    name: str = ""
    type: str = ""
    definition: str = ""
    table: Optional[str] = None
    referenced_table: Optional[str] = None
    columns: list[str] = field(default_factory=list)
    referenced_columns: list[str] = field(default_factory=list)
    comment: str = ""


@dataclass
class Trigger:
    name: str = ""
    definition: str = ""
    comment: str = ""


@dataclass(eq=False)
class Column:
    name: str = ""
    type: str = ""
    nullable: bool = False
    default: Optional[str] = None
    comment: str = ""
    extra_def: str = ""
    occurrences: Optional[int] = None
    percents: Optional[float] = None
    labels: Labels = field(default_factory=Labels)
    parent_relations: list[Relation] = field(default_factory=list, repr=False)
    child_relations: list[Relation] = field(default_factory=list, repr=False)
    pk: bool = False
    fk: bool = False
    hide_for_er: bool = False


@dataclass(eq=False)
class Table:
    name: str = ""
    type: str = ""
    comment: str = ""
    columns: list[Column] = field(default_factory=list)
    indexes: list[Index] = field(default_factory=list)
    constraints: list[Constraint] = field(default_factory=list)
    triggers: list[Trigger] = field(default_factory=list)
    definition: str = ""
    labels: Labels = field(default_factory=Labels)
    referenced_tables: list[Table] = field(default_factory=list, repr=False)
    external: bool = False

    def find_column_by_name(self, name: str) -> Column:
        for column in self.columns:
            if column.name == name:
                return column
        raise NotFoundError(f"not found column '{name}' on table '{self.name}'")

    def find_index_by_name(self, name: str) -> Index:
        for index in self.indexes:
            if index.name == name:
                return index
        raise NotFoundError(f"not found index '{name}' on table '{self.name}'")

    def find_constraint_by_name(self, name: str) -> Constraint:
        for constraint in self.constraints:
            if constraint.name == name:
                return constraint
        raise NotFoundError(f"not found constraint '{name}' on table '{self.name}'")

    def find_trigger_by_name(self, name: str) -> Trigger:
        for trigger in self.triggers:
            if trigger.name == name:
                return trigger
        raise NotFoundError(f"not found trigger '{name}' on table '{self.name}'")

    def find_constraints_by_column_name(self, name: str) -> list[Constraint]:
        """Constraints naming column *name*, once per occurrence."""
        return [c for c in self.constraints for col in c.columns or [] if col == name]

    def has_column_with_values(self, name: str) -> bool:
        """Whether any column has a value for the documentation column *name*."""
        checks = {
            COLUMN_EXTRA_DEF: lambda c: c.extra_def != "",
            COLUMN_OCCURRENCES: lambda c: c.occurrences is not None,
            COLUMN_PERCENTS: lambda c: c.percents is not None,
            COLUMN_CHILDREN: lambda c: bool(c.child_relations),
            COLUMN_PARENTS: lambda c: bool(c.parent_relations),
            COLUMN_COMMENT: lambda c: c.comment != "",
            COLUMN_LABELS: lambda c: bool(c.labels),
        }
        check = checks.get(name)
        if check is None:
            return False
        return any(check(column) for column in self.columns)

    def show_column(self, name: str, hide_columns: Iterable[str]) -> bool:
        """Whether documentation column *name* should be shown for this table."""
        hidden = set(DEFAULT_HIDE_COLUMNS) | set(hide_columns or ())
        if name in hidden:
            return self.has_column_with_values(name)
        return True

    def collect_tables_and_relations(
        self, distance: int, root: bool
    ) -> tuple[list[Table], list[Relation]]:
        """Tables and relations reachable from this table within *distance* hops.

        This table comes first. At the root, tables are unique by name and
        relations unique, keeping only those whose both ends were collected.
        """
        tables: list[Table] = [self]
        relations: list[Relation] = []
        if distance == 0:
            return tables, relations
        distance -= 1
        for column in self.columns:
            for relation in column.parent_relations:
                relations.append(relation)
                ts, rs = relation.parent_table.collect_tables_and_relations(distance, False)
                tables.extend(ts)
                relations.extend(rs)
            for relation in column.child_relations:
                relations.append(relation)
                ts, rs = relation.table.collect_tables_and_relations(distance, False)
                tables.extend(ts)
                relations.extend(rs)

        if not root:
            return tables, relations

        unique_tables: list[Table] = []
        seen_names: set[str] = set()
        for table in tables:
            if table.name not in seen_names:
                seen_names.add(table.name)
                unique_tables.append(table)

        unique_relations: list[Relation] = []
        seen_relations: set[int] = set()
        for relation in relations:
            if id(relation) in seen_relations:
                continue
            seen_relations.add(id(relation))
            if relation.parent_table.name in seen_names and relation.table.name in seen_names:
                unique_relations.append(relation)

        return unique_tables, unique_relations


@dataclass(eq=False)
class Relation:
    table: Optional[Table] = None
    columns: list[Column] = field(default_factory=list)
    parent_table: Optional[Table] = None
    parent_columns: list[Column] = field(default_factory=list)
    cardinality: Cardinality = Cardinality.UNKNOWN
    parent_cardinality: Cardinality = Cardinality.UNKNOWN
    definition: str = ""
    virtual: bool = False
    hide_for_er: bool = False


@dataclass
class DriverMeta:
    current_schema: str = ""
    search_paths: list[str] = field(default_factory=list)
    dictionary: Optional[dict[str, str]] = None


@dataclass
class Function:
    name: str = ""
    return_type: str = ""
    arguments: str = ""
    type: str = ""


@dataclass
class Driver:
    name: str = ""
    database_version: str = ""
    meta: Optional[DriverMeta] = None


@dataclass(eq=False)
class Schema:
    name: str = ""
    desc: str = ""
    tables: list[Table] = field(default_factory=list)
    relations: list[Relation] = field(default_factory=list)
    functions: list[Function] = field(default_factory=list)
    driver: Optional[Driver] = None
    labels: Labels = field(default_factory=Labels)
    viewpoints: Viewpoints = field(default_factory=Viewpoints)

    def normalize_table_name(self, name: str) -> str:
        """Qualify *name* with the current schema for postgres and redshift."""
        driver = self.driver
        if (
            driver is not None
            and driver.meta is not None
            and driver.meta.current_schema != ""
            and driver.name in ("postgres", "redshift")
            and "." not in name
        ):
            return f"{driver.meta.current_schema}.{name}"
        return name

    def normalize_table_names(self, names: Iterable[str]) -> list[str]:
        return [self.normalize_table_name(n) for n in names]

    def find_table_by_name(self, name: str) -> Table:
        wanted = self.normalize_table_name(name)
        for table in self.tables:
            if self.normalize_table_name(table.name) == wanted:
                return table
        raise NotFoundError(f"not found table '{name}'")

    def find_relation(
        self, columns: list[Column], parent_columns: list[Column]
    ) -> Relation:
        """The relation whose columns are exactly these column objects."""

        def all_in(found: list[Column], pool: list[Column]) -> bool:
            return all(any(c is p for p in pool) for c in found)

        for relation in self.relations:
            if len(relation.columns) != len(columns) or len(relation.parent_columns) != len(
                parent_columns
            ):
                continue
            if all_in(relation.columns, columns) and all_in(
                relation.parent_columns, parent_columns
            ):
                return relation
        names = [c.name for c in columns]
        parent_names = [c.name for c in parent_columns]
        raise NotFoundError(f"not found relation '{names}, {parent_names}'")

    def has_table_with_labels(self) -> bool:
        return any(table.labels for table in self.tables)

    def sort(self) -> None:
        """Sort tables, columns, relations, constraints, functions and viewpoints by name."""
        for table in self.tables:
            for column in table.columns:
                column.parent_relations.sort(key=lambda r: r.table.name)
                column.child_relations.sort(key=lambda r: r.table.name)
            table.columns.sort(key=lambda c: c.name)
            table.indexes.sort(key=lambda i: i.name)
            table.constraints.sort(key=lambda c: c.name)
            table.triggers.sort(key=lambda t: t.name)
        self.tables.sort(key=lambda t: t.name)
        self.relations.sort(key=lambda r: r.table.name)
        self.functions.sort(key=lambda f: f.name)
        self.viewpoints.sort(key=lambda v: v.name)