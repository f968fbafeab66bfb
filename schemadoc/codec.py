"""Conversion of schema objects to and from JSON and YAML documents."""

from __future__ import annotations

import json
from enum import Enum
from typing import Any, Optional, Union

import yaml

from schemadoc.cardinality import to_cardinality
from schemadoc.schema import (
    Column,
    Constraint,
    Driver,
    DriverMeta,
    Function,
    Index,
    Label,
    Labels,
    Relation,
    Schema,
    Table,
    Trigger,
    Viewpoint,
    ViewpointGroup,
    Viewpoints,
)

__all__ = [
    "KeyStyle",
    "schema_to_dict",
    "schema_from_dict",
    "table_to_dict",
    "table_from_dict",
    "column_to_dict",
    "column_from_dict",
    "relation_to_dict",
    "relation_from_dict",
    "dumps_json",
    "loads_json",
    "dumps_yaml",
    "loads_yaml",
]


class KeyStyle(str, Enum):
    """Naming of document keys: snake_case for JSON, camelCase for YAML."""

    JSON = "json"
    YAML = "yaml"

    def key(self, name: str) -> str:
        """The document key for the snake_case field *name*."""
        if self is KeyStyle.JSON:
            return name
        head, *rest = name.split("_")
        return head + "".join(part.capitalize() for part in rest)

    def label_key(self, name: str) -> str:
        """Label fields carry capitalised keys in JSON and lower-case ones in YAML."""
        return name.capitalize() if self is KeyStyle.JSON else name


Style = Union[KeyStyle, str]


# ---------------------------------------------------------------- reading helpers


def _get(data: dict, key: str) -> Any:
    if key in data:
        return data[key]
    lowered = key.lower()
    for k, v in data.items():
        if isinstance(k, str) and k.lower() == lowered:
            return v
    return None


def _mapping(value: Any, what: str) -> dict:
    if not isinstance(value, dict):
        raise ValueError(f"{what} must be an object, not {type(value).__name__}")
    return value


def _string(value: Any, what: str) -> str:
    if value is None:
        return ""
    if not isinstance(value, str):
        raise ValueError(f"{what} must be a string, not {type(value).__name__}")
    return value


def _optional_string(value: Any, what: str) -> Optional[str]:
    if value is None:
        return None
    return _string(value, what)


def _bool(value: Any, what: str) -> bool:
    if value is None:
        return False
    if not isinstance(value, bool):
        raise ValueError(f"{what} must be a boolean, not {type(value).__name__}")
    return value


def _int(value: Any, what: str) -> int:
    if value is None:
        return 0
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"{what} must be an integer, not {type(value).__name__}")
    return value


def _list(value: Any, what: str) -> list:
    if value is None:
        return []
    if not isinstance(value, list):
        raise ValueError(f"{what} must be a list, not {type(value).__name__}")
    return value


def _strings(value: Any, what: str) -> list[str]:
    return [_string(item, what) for item in _list(value, what)]


def _nullable_list(items: list[str]) -> Optional[list[str]]:
    return list(items) if items else None


# ---------------------------------------------------------------- labels


def _labels_to_list(labels: Labels, style: KeyStyle) -> list[dict]:
    return [
        {style.label_key("name"): label.name, style.label_key("virtual"): label.virtual}
        for label in labels
    ]


def _labels_from(value: Any) -> Labels:
    labels = Labels()
    for item in _list(value, "labels"):
        item = _mapping(item, "label")
        labels.append(
            Label(
                name=_string(_get(item, "name"), "label name"),
                virtual=_bool(_get(item, "virtual"), "label virtual"),
            )
        )
    return labels


# ---------------------------------------------------------------- small records


def _index_to_dict(index: Index, style: KeyStyle) -> dict:
    return {
        "name": index.name,
        "def": index.definition,
        "table": index.table,
        "columns": _nullable_list(index.columns),
        "comment": index.comment,
    }


def _index_from(data: Any) -> Index:
    data = _mapping(data, "index")
    return Index(
        name=_string(_get(data, "name"), "index name"),
        definition=_string(_get(data, "def"), "index def"),
        table=_optional_string(_get(data, "table"), "index table"),
        columns=_strings(_get(data, "columns"), "index columns"),
        comment=_string(_get(data, "comment"), "index comment"),
    )


def _constraint_to_dict(constraint: Constraint, style: KeyStyle) -> dict:
    return {
        "name": constraint.name,
        "type": constraint.type,
        "def": constraint.definition,
        "table": constraint.table,
        style.key("referenced_table"): constraint.referenced_table,
        "columns": _nullable_list(constraint.columns),
        style.key("referenced_columns"): _nullable_list(constraint.referenced_columns),
        "comment": constraint.comment,
    }


def _constraint_from(data: Any, style: KeyStyle) -> Constraint:
    data = _mapping(data, "constraint")
    return Constraint(
        name=_string(_get(data, "name"), "constraint name"),
        type=_string(_get(data, "type"), "constraint type"),
        definition=_string(_get(data, "def"), "constraint def"),
        table=_optional_string(_get(data, "table"), "constraint table"),
        referenced_table=_optional_string(
            _get(data, style.key("referenced_table")), "constraint referenced table"
        ),
        columns=_strings(_get(data, "columns"), "constraint columns"),
        referenced_columns=_strings(
            _get(data, style.key("referenced_columns")), "constraint referenced columns"
        ),
        comment=_string(_get(data, "comment"), "constraint comment"),
    )


def _trigger_to_dict(trigger: Trigger) -> dict:
    return {"name": trigger.name, "def": trigger.definition, "comment": trigger.comment}


def _trigger_from(data: Any) -> Trigger:
    data = _mapping(data, "trigger")
    return Trigger(
        name=_string(_get(data, "name"), "trigger name"),
        definition=_string(_get(data, "def"), "trigger def"),
        comment=_string(_get(data, "comment"), "trigger comment"),
    )


def _function_to_dict(function: Function, style: KeyStyle) -> dict:
    return {
        "name": function.name,
        style.key("return_type"): function.return_type,
        "arguments": function.arguments,
        "type": function.type,
    }


def _function_from(data: Any, style: KeyStyle) -> Function:
    data = _mapping(data, "function")
    return Function(
        name=_string(_get(data, "name"), "function name"),
        return_type=_string(_get(data, style.key("return_type")), "function return type"),
        arguments=_string(_get(data, "arguments"), "function arguments"),
        type=_string(_get(data, "type"), "function type"),
    )


def _meta_to_dict(meta: DriverMeta, style: KeyStyle) -> dict:
    data: dict[str, Any] = {}
    if meta.current_schema:
        data[style.key("current_schema")] = meta.current_schema
    if meta.search_paths:
        data[style.key("search_paths")] = list(meta.search_paths)
    if meta.dictionary:
        data["dict"] = dict(meta.dictionary)
    return data


def _meta_from(data: Any, style: KeyStyle) -> DriverMeta:
    data = _mapping(data, "driver meta")
    raw_dict = _get(data, "dict")
    dictionary = None
    if raw_dict is not None:
        raw_dict = _mapping(raw_dict, "driver dict")
        dictionary = {str(k): _string(v, "dict entry") for k, v in raw_dict.items()}
    return DriverMeta(
        current_schema=_string(_get(data, style.key("current_schema")), "current schema"),
        search_paths=_strings(_get(data, style.key("search_paths")), "search paths"),
        dictionary=dictionary,
    )


def _driver_to_dict(driver: Driver, style: KeyStyle) -> dict:
    meta = driver.meta
    if meta is None and style is KeyStyle.JSON:
        meta = DriverMeta()
    return {
        "name": driver.name,
        style.key("database_version"): driver.database_version,
        "meta": None if meta is None else _meta_to_dict(meta, style),
    }


def _driver_from(data: Any, style: KeyStyle) -> Driver:
    data = _mapping(data, "driver")
    meta = _get(data, "meta")
    return Driver(
        name=_string(_get(data, "name"), "driver name"),
        database_version=_string(
            _get(data, style.key("database_version")), "driver database version"
        ),
        meta=None if meta is None else _meta_from(meta, style),
    )


def _group_to_dict(group: ViewpointGroup) -> dict:
    data: dict[str, Any] = {}
    if group.name:
        data["name"] = group.name
    if group.desc:
        data["desc"] = group.desc
    if group.labels:
        data["labels"] = list(group.labels)
    if group.tables:
        data["tables"] = list(group.tables)
    if group.color:
        data["color"] = group.color
    return data


def _group_from(data: Any) -> ViewpointGroup:
    data = _mapping(data, "viewpoint group")
    return ViewpointGroup(
        name=_string(_get(data, "name"), "group name"),
        desc=_string(_get(data, "desc"), "group desc"),
        labels=_strings(_get(data, "labels"), "group labels"),
        tables=_strings(_get(data, "tables"), "group tables"),
        color=_string(_get(data, "color"), "group color"),
    )


def _viewpoint_to_dict(viewpoint: Viewpoint) -> dict:
    data: dict[str, Any] = {}
    if viewpoint.name:
        data["name"] = viewpoint.name
    if viewpoint.desc:
        data["desc"] = viewpoint.desc
    if viewpoint.labels:
        data["labels"] = list(viewpoint.labels)
    if viewpoint.tables:
        data["tables"] = list(viewpoint.tables)
    if viewpoint.distance:
        data["distance"] = viewpoint.distance
    if viewpoint.groups:
        data["groups"] = [_group_to_dict(g) for g in viewpoint.groups]
    return data


def _viewpoint_from(data: Any) -> Viewpoint:
    data = _mapping(data, "viewpoint")
    return Viewpoint(
        name=_string(_get(data, "name"), "viewpoint name"),
        desc=_string(_get(data, "desc"), "viewpoint desc"),
        labels=_strings(_get(data, "labels"), "viewpoint labels"),
        tables=_strings(_get(data, "tables"), "viewpoint tables"),
        distance=_int(_get(data, "distance"), "viewpoint distance"),
        groups=[_group_from(g) for g in _list(_get(data, "groups"), "viewpoint groups")],
    )


# ---------------------------------------------------------------- columns


def column_to_dict(column: Column, key_style: Style = KeyStyle.JSON) -> dict:
    """The document form of *column*; relations are not included."""
    style = KeyStyle(key_style)
    data: dict[str, Any] = {
        "name": column.name,
        "type": column.type,
        "nullable": column.nullable,
        "default": column.default,
    }

    def add_extra_and_labels() -> None:
        if column.extra_def:
            data[style.key("extra_def")] = column.extra_def
        if column.labels:
            data["labels"] = _labels_to_list(column.labels, style)

    if style is KeyStyle.JSON and column.default is None:
        data["comment"] = column.comment
        add_extra_and_labels()
    else:
        add_extra_and_labels()
        data["comment"] = column.comment
    return data


def column_from_dict(data: Any, key_style: Style = KeyStyle.JSON) -> Column:
    """Build a column from its document form."""
    style = KeyStyle(key_style)
    data = _mapping(data, "column")
    return Column(
        name=_string(_get(data, "name"), "column name"),
        type=_string(_get(data, "type"), "column type"),
        nullable=_bool(_get(data, "nullable"), "column nullable"),
        default=_optional_string(_get(data, "default"), "column default"),
        comment=_string(_get(data, "comment"), "column comment"),
        extra_def=_string(_get(data, style.key("extra_def")), "column extra def"),
        labels=_labels_from(_get(data, "labels")),
    )


# ---------------------------------------------------------------- tables


def table_to_dict(table: Table, key_style: Style = KeyStyle.JSON) -> dict:
    """The document form of *table*; referenced tables appear by name."""
    style = KeyStyle(key_style)
    data: dict[str, Any] = {
        "name": table.name,
        "type": table.type,
        "comment": table.comment,
        "columns": [column_to_dict(c, style) for c in table.columns],
        "indexes": [_index_to_dict(i, style) for i in table.indexes],
        "constraints": [_constraint_to_dict(c, style) for c in table.constraints],
        "triggers": [_trigger_to_dict(t) for t in table.triggers],
        "def": table.definition,
    }
    if table.labels:
        data["labels"] = _labels_to_list(table.labels, style)
    if table.referenced_tables:
        data[style.key("referenced_tables")] = [t.name for t in table.referenced_tables]
    return data


def table_from_dict(data: Any, key_style: Style = KeyStyle.JSON) -> Table:
    """Build a table; referenced tables become bare tables holding only a name."""
    style = KeyStyle(key_style)
    data = _mapping(data, "table")
    return Table(
        name=_string(_get(data, "name"), "table name"),
        type=_string(_get(data, "type"), "table type"),
        comment=_string(_get(data, "comment"), "table comment"),
        columns=[column_from_dict(c, style) for c in _list(_get(data, "columns"), "columns")],
        indexes=[_index_from(i) for i in _list(_get(data, "indexes"), "indexes")],
        constraints=[
            _constraint_from(c, style)
            for c in _list(_get(data, "constraints"), "constraints")
        ],
        triggers=[_trigger_from(t) for t in _list(_get(data, "triggers"), "triggers")],
        definition=_string(_get(data, "def"), "table def"),
        labels=_labels_from(_get(data, "labels")),
        referenced_tables=[
            Table(name=name)
            for name in _strings(
                _get(data, style.key("referenced_tables")), "referenced tables"
            )
        ],
    )


# ---------------------------------------------------------------- relations


def relation_to_dict(relation: Relation, key_style: Style = KeyStyle.JSON) -> dict:
    """The document form of *relation*; tables and columns appear by name."""
    style = KeyStyle(key_style)
    if relation.table is None or relation.parent_table is None:
        raise ValueError("relation must have both a table and a parent table")
    return {
        "table": relation.table.name,
        "columns": [c.name for c in relation.columns],
        "cardinality": relation.cardinality.value,
        style.key("parent_table"): relation.parent_table.name,
        style.key("parent_columns"): [c.name for c in relation.parent_columns],
        style.key("parent_cardinality"): relation.parent_cardinality.value,
        "def": relation.definition,
        "virtual": relation.virtual,
    }


def relation_from_dict(data: Any, key_style: Style = KeyStyle.JSON) -> Relation:
    """Build a relation whose tables and columns are bare placeholders by name.

    Raises ValueError for an unknown cardinality.
    """
    style = KeyStyle(key_style)
    data = _mapping(data, "relation")
    return Relation(
        table=Table(name=_string(_get(data, "table"), "relation table")),
        columns=[
            Column(name=name) for name in _strings(_get(data, "columns"), "relation columns")
        ],
        cardinality=to_cardinality(_string(_get(data, "cardinality"), "cardinality")),
        parent_table=Table(
            name=_string(_get(data, style.key("parent_table")), "relation parent table")
        ),
        parent_columns=[
            Column(name=name)
            for name in _strings(
                _get(data, style.key("parent_columns")), "relation parent columns"
            )
        ],
        parent_cardinality=to_cardinality(
            _string(_get(data, style.key("parent_cardinality")), "parent cardinality")
        ),
        definition=_string(_get(data, "def"), "relation def"),
        virtual=_bool(_get(data, "virtual"), "relation virtual"),
    )


# ---------------------------------------------------------------- schemas


def schema_to_dict(schema: Schema, key_style: Style = KeyStyle.JSON) -> dict:
    """The document form of *schema*."""
    style = KeyStyle(key_style)
    data: dict[str, Any] = {
        "name": schema.name,
        "desc": schema.desc,
        "tables": [table_to_dict(t, style) for t in schema.tables],
        "relations": [relation_to_dict(r, style) for r in schema.relations],
        "functions": [_function_to_dict(f, style) for f in schema.functions] or None,
        "driver": None if schema.driver is None else _driver_to_dict(schema.driver, style),
    }
    if schema.labels:
        data["labels"] = _labels_to_list(schema.labels, style)
    if schema.viewpoints:
        data["viewpoints"] = [_viewpoint_to_dict(v) for v in schema.viewpoints]
    return data


def schema_from_dict(data: Any, key_style: Style = KeyStyle.JSON) -> Schema:
    """Build a schema from its document form.

    Relations refer to placeholder tables and columns until the schema is repaired.
    """
    style = KeyStyle(key_style)
    data = _mapping(data, "schema")
    driver = _get(data, "driver")
    return Schema(
        name=_string(_get(data, "name"), "schema name"),
        desc=_string(_get(data, "desc"), "schema desc"),
        tables=[table_from_dict(t, style) for t in _list(_get(data, "tables"), "tables")],
        relations=[
            relation_from_dict(r, style) for r in _list(_get(data, "relations"), "relations")
        ],
        functions=[
            _function_from(f, style) for f in _list(_get(data, "functions"), "functions")
        ],
        driver=None if driver is None else _driver_from(driver, style),
        labels=_labels_from(_get(data, "labels")),
        viewpoints=Viewpoints(
            _viewpoint_from(v) for v in _list(_get(data, "viewpoints"), "viewpoints")
        ),
    )


# ---------------------------------------------------------------- text forms

_ENCODERS = (
    (Schema, schema_to_dict),
    (Table, table_to_dict),
    (Column, column_to_dict),
    (Relation, relation_to_dict),
)

_JSON_ESCAPES = {
    "&": "\\u0026",
    "<": "\\u003c",
    ">": "\\u003e",
    "\u2028": "\\u2028",
    "\u2029": "\\u2029",
}


def _to_dict(obj: Any, style: KeyStyle) -> dict:
    for kind, encode in _ENCODERS:
        if isinstance(obj, kind):
            return encode(obj, style)
    raise TypeError(f"cannot encode {type(obj).__name__}")


def dumps_json(obj: Union[Schema, Table, Column, Relation], indent: Optional[int] = 2) -> str:
    """JSON text for *obj*, without a trailing newline.

    With *indent* None the text is compact. HTML-sensitive characters are
    written as unicode escapes.
    """
    data = _to_dict(obj, KeyStyle.JSON)
    separators = (",", ":") if indent is None else (",", ": ")
    text = json.dumps(data, ensure_ascii=False, indent=indent, separators=separators)
    return "".join(_JSON_ESCAPES.get(ch, ch) for ch in text)


def loads_json(text: Union[str, bytes]) -> Schema:
    """Parse a schema from JSON text; raises ValueError on malformed input."""
    return schema_from_dict(json.loads(text), KeyStyle.JSON)


def dumps_yaml(obj: Union[Schema, Table, Column, Relation]) -> str:
    """YAML text for *obj* with camelCase keys."""
    data = _to_dict(obj, KeyStyle.YAML)
    return yaml.safe_dump(data, sort_keys=False, allow_unicode=True, default_flow_style=False)


def loads_yaml(text: Union[str, bytes]) -> Schema:
    """Parse a schema from YAML text; raises ValueError on malformed input."""
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ValueError(f"invalid YAML: {exc}") from exc
    return schema_from_dict(data, KeyStyle.YAML)