import pytest

from schemadoc.codec import schema_from_dict, schema_to_dict
from schemadoc.filtering import (
    FilterOption,
    clone,
    clone_without_viewpoints,
    filter_schema,
    repair,
    repair_without_viewpoints,
    separate_tables,
)
from schemadoc.sample import new_schema
from schemadoc.schema import NotFoundError


def _relation(child, parent):
    return {
        "table": child,
        "columns": ["b_id"],
        "parent_table": parent,
        "parent_columns": ["id"],
        "cardinality": "",
        "parent_cardinality": "",
    }


def _chain_data():
    return {
        "name": "chain",
        "tables": [
            {"name": "a", "columns": [{"name": "b_id"}]},
            {"name": "b", "columns": [{"name": "id", "labels": [{"name": "pk"}]}]},
            {"name": "c", "columns": [{"name": "b_id"}]},
        ],
        "relations": [_relation("a", "b"), _relation("c", "b")],
    }


def _chain():
    schema = schema_from_dict(_chain_data())
    repair(schema)
    return schema


def _names(tables):
    return [t.name for t in tables]


def test_include_by_name_distance_zero():
    schema = new_schema()
    includes, excludes = separate_tables(schema, FilterOption(include=["a"]))
    assert _names(includes) == ["a"]
    assert _names(excludes) == ["b"]


def test_include_by_name_reaches_related_tables():
    schema = new_schema()
    includes, excludes = separate_tables(schema, FilterOption(include=["a"], distance=1))
    assert _names(includes) == ["a", "b"]
    assert excludes == []


def test_no_selection_keeps_all_but_excluded():
    schema = new_schema()
    includes, excludes = separate_tables(schema, FilterOption(exclude=["b"]))
    assert _names(includes) == ["a"]
    assert _names(excludes) == ["b"]


def test_longer_exclude_pattern_wins():
    schema = new_schema()
    includes, excludes = separate_tables(schema, FilterOption(include=["*"], exclude=["b"]))
    assert _names(includes) == ["a"]
    assert _names(excludes) == ["b"]


def test_longer_include_pattern_wins():
    schema = new_schema()
    includes, excludes = separate_tables(schema, FilterOption(include=["b"], exclude=["*"]))
    assert _names(includes) == ["b"]
    assert _names(excludes) == ["a"]


def test_labels_with_exclude():
    schema = new_schema()
    includes, excludes = separate_tables(
        schema, FilterOption(include_labels=["green"], exclude=["b"])
    )
    assert _names(includes) == ["a"]
    assert _names(excludes) == ["b"]


def test_column_label_wildcard_selects_table():
    schema = _chain()
    includes, excludes = separate_tables(schema, FilterOption(include_labels=["p*"]))
    assert _names(includes) == ["b"]
    assert _names(excludes) == ["a", "c"]


def test_duplicate_reach_fails_to_separate():
    schema = _chain()
    with pytest.raises(ValueError, match="failed to separate tables"):
        separate_tables(schema, FilterOption(include=["a", "c"], distance=1))


def test_separation_partitions_all_tables():
    schema = _chain()
    includes, excludes = separate_tables(schema, FilterOption(include=["b"], distance=1))
    assert sorted(_names(includes) + _names(excludes)) == ["a", "b", "c"]


def test_include_is_normalized_for_postgres():
    data = _chain_data()
    data["tables"] = [{"name": "public.a"}, {"name": "public.b"}]
    data["relations"] = []
    data["driver"] = {"name": "postgres", "meta": {"current_schema": "public"}}
    schema = schema_from_dict(data)
    includes, excludes = separate_tables(schema, FilterOption(include=["a"]))
    assert _names(includes) == ["public.a"]
    assert _names(excludes) == ["public.b"]


def test_filter_schema_removes_tables_and_relations():
    schema = _chain()
    filter_schema(schema, FilterOption(include=["a"]))
    assert _names(schema.tables) == ["a"]
    assert schema.relations == []
    assert schema.tables[0].columns[0].parent_relations == []


def test_repair_links_relations_to_columns():
    schema = _chain()
    table_b = schema.tables[1]
    parent_column = table_b.columns[0]
    assert len(parent_column.child_relations) == 2
    for relation in schema.relations:
        assert relation.parent_table is table_b
        assert relation.parent_columns[0] is parent_column
        assert relation.columns[0] is relation.table.columns[0]


def test_repair_missing_table_raises():
    data = _chain_data()
    data["relations"].append(_relation("a", "zzz"))
    schema = schema_from_dict(data)
    with pytest.raises(NotFoundError, match="failed to repair relation"):
        repair_without_viewpoints(schema)


def test_repair_marks_external_referenced_tables():
    data = _chain_data()
    data["tables"][0]["referenced_tables"] = ["b", "elsewhere"]
    schema = schema_from_dict(data)
    repair_without_viewpoints(schema)
    refs = schema.tables[0].referenced_tables
    assert refs[0] is schema.tables[1]
    assert refs[1].external is True
    assert refs[1].name == "elsewhere"


def test_clone_is_equal_but_separate():
    original = new_schema()
    copy = clone(original)
    assert copy is not original
    assert copy.tables[0] is not original.tables[0]
    assert schema_to_dict(copy) == schema_to_dict(original)
    assert [_names(v.schema.tables) for v in copy.viewpoints] == [
        _names(v.schema.tables) for v in original.viewpoints
    ]


def test_clone_without_viewpoints_leaves_viewpoint_schemas_unset():
    copy = clone_without_viewpoints(new_schema())
    assert len(copy.viewpoints) == 4
    assert all(v.schema is None for v in copy.viewpoints)
    assert copy.relations[0].table is copy.tables[1]