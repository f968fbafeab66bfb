# schemadoc

An in-memory model of a database schema, with the operations needed to
document it. The model covers tables, columns, indexes, constraints,
triggers, relations, functions, labels and viewpoints.

- `schemadoc.schema`: the data classes (`Schema`, `Table`, `Column`,
  `Relation`, `Index`, `Constraint`, `Trigger`, `Function`, `Driver`,
  `DriverMeta`, `Label`/`Labels`, `Viewpoint`/`Viewpoints`,
  `ViewpointGroup`). It also provides name lookups such as
  `Schema.find_table_by_name` and `Table.find_column_by_name`,
  `Schema.normalize_table_name`, `Schema.sort`, `Table.show_column` and
  `Table.collect_tables_and_relations`.
- `schemadoc.cardinality`: the `Cardinality` enum and `to_cardinality`,
  which accepts the usual aliases.
- `schemadoc.filtering`: `FilterOption`, `separate_tables` and
  `filter_schema` select tables by name wildcard (`*`, `?`), by table or
  column label, and by relation distance. `repair` and
  `repair_without_viewpoints` rebuild the object links after loading.
  `clone` and `clone_without_viewpoints` make deep copies.
- `schemadoc.codec`: converts schemas, tables, columns and relations to and
  from plain dicts (`KeyStyle.JSON` gives snake_case keys, `KeyStyle.YAML`
  gives camelCase keys). It also reads and writes text with `dumps_json`,
  `loads_json`, `dumps_yaml` and `loads_yaml`.
- `schemadoc.writers`: `JsonWriter` (indented, or compact with
  `inline=True`) and `YamlWriter` write a schema or a table to a text
  stream.
- `schemadoc.formatting`: text helpers for templates. These are
  `nl2br`, `nl2mdnl`, `escape_url`, `escape_mermaid`,
  `show_only_first_paragraph`, `label_join`, `left_cardinality`,
  `right_cardinality` and others, all collected by `template_funcs`.
- `schemadoc.sample`: `new_schema()` builds a small repaired schema with two
  related tables, labels and viewpoints.

## Install

```
pip install .
```

## Example

```python
import sys

from schemadoc.sample import new_schema
from schemadoc.filtering import FilterOption, filter_schema, clone
from schemadoc.writers import JsonWriter, YamlWriter

schema = new_schema()

# Follow relations one step out from table "a".
table = schema.find_table_by_name("a")
tables, relations = table.collect_tables_and_relations(1, True)
print([t.name for t in tables])          # ['a', 'b']

# Keep only tables labelled "blue", working on a copy.
copy = clone(schema)
filter_schema(copy, FilterOption(include_labels=["blue"]))
print([t.name for t in copy.tables])     # ['a']

JsonWriter().output_schema(sys.stdout, schema)
YamlWriter().output_table(sys.stdout, table)
```

A schema read back from text refers to placeholder tables and columns until
it is repaired:

```python
from schemadoc.codec import dumps_json, loads_json
from schemadoc.filtering import repair

copy = loads_json(dumps_json(schema))
repair(copy)
```

Cardinalities accept the usual aliases:

```python
from schemadoc.cardinality import Cardinality, to_cardinality

assert to_cardinality("Zero or One") is Cardinality.ZERO_OR_ONE
assert to_cardinality("1..*") is Cardinality.ONE_OR_MORE
```

## Errors

- An unknown cardinality alias raises `ValueError`.
- Malformed JSON or YAML raises `ValueError`, and so do fields of the wrong
  type.
- A failed lookup by name raises `schemadoc.schema.NotFoundError`. This
  includes a relation that names a missing table or column during repair.

## What it does not do

This package works only on schemas that you build in code or load from JSON
or YAML. It does not connect to any database to read a schema. It has no
command-line tool. It does not produce Markdown pages, ER diagrams or
spreadsheets. The `formatting` helpers are the building blocks such
templates would use.

## Tests

```
pip install .[test]
pytest
```