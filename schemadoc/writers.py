"""Writers that emit a schema or a table as JSON or YAML."""

from __future__ import annotations

from typing import TextIO, Union

from schemadoc.codec import dumps_json, dumps_yaml
from schemadoc.schema import Schema, Table

__all__ = ["JsonWriter", "YamlWriter"]


class JsonWriter:
    """Writes JSON documents, indented unless *inline*."""

    def __init__(self, inline: bool = False) -> None:
        self.inline = inline

    def _write(self, stream: TextIO, obj: Union[Schema, Table]) -> None:
        stream.write(dumps_json(obj, indent=None if self.inline else 2))
        stream.write("\n")

    def output_schema(self, stream: TextIO, schema: Schema) -> None:
        self._write(stream, schema)

    def output_table(self, stream: TextIO, table: Table) -> None:
        self._write(stream, table)


class YamlWriter:
    """Writes YAML documents with camelCase keys."""

    def output_schema(self, stream: TextIO, schema: Schema) -> None:
        stream.write(dumps_yaml(schema))

    def output_table(self, stream: TextIO, table: Table) -> None:
        stream.write(dumps_yaml(table))