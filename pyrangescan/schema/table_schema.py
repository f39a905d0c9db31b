################################################################################
#  Licensed to the Apache Software Foundation (ASF) under one
#  or more contributor license agreements.  See the NOTICE file
#  distributed with this work for additional information
#  regarding copyright ownership.  The ASF licenses this file
#  to you under the Apache License, Version 2.0 (the
#  "License"); you may not use this file except in compliance
#  with the License.  You may obtain a copy of the License at
#
#      http://www.apache.org/licenses/LICENSE-2.0
#
#  Unless required by applicable law or agreed to in writing, software
#  distributed under the License is distributed on an "AS IS" BASIS,
#  WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
#  See the License for the specific language governing permissions and
# limitations under the License.
################################################################################

from typing import List, Optional

import pyarrow as pa

from pyrangescan.catalog.catalog_exception import SchemaMismatchException

STAR_COLUMN = '*'
DEFAULT_ROW_KEY = 'row_key'


def is_star_query(columns: Optional[List[str]]) -> bool:
    return not columns or STAR_COLUMN in columns


class TableSchema:
    """Column layout of a table, used to validate scan projections."""

    def __init__(self, table_name: str, column_names: List[str], row_key: str = DEFAULT_ROW_KEY):
        self.table_name = table_name
        self.column_names = list(column_names)
        self.row_key = row_key
        self._column_set = set(self.column_names)

    @staticmethod
    def from_pyarrow_schema(table_name: str, pa_schema: pa.Schema,
                            row_key: str = DEFAULT_ROW_KEY) -> 'TableSchema':
        return TableSchema(table_name, pa_schema.names, row_key)

    def has_column(self, name: str) -> bool:
        return name == self.row_key or name in self._column_set

    def validate_projection(self, columns: Optional[List[str]]):
        """
        Checks that every projected column exists. Nested paths are validated by
        their root segment, i.e. the text before the first '.'.

        Raises:
            SchemaMismatchException: if a column is unknown to the table.
        """
        if is_star_query(columns):
            return
        for column in columns:
            root_segment = column.split('.', 1)[0]
            if not self.has_column(root_segment):
                raise SchemaMismatchException(self.table_name, root_segment)

    def __eq__(self, other) -> bool:
        if not isinstance(other, TableSchema):
            return False
        return (self.table_name == other.table_name and self.column_names == other.column_names
                and self.row_key == other.row_key)

    def __repr__(self) -> str:
        return f"TableSchema(table_name={self.table_name!r}, columns={self.column_names}, row_key={self.row_key!r})"
