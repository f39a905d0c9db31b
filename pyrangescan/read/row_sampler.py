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

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Iterator, List

import pyarrow as pa
import pyarrow.compute as pc

from pyrangescan.read.scan_spec import ScanSpec
from pyrangescan.schema.table_schema import DEFAULT_ROW_KEY


@dataclass
class SampledRow:
    """Raw cell sizes of one sampled row."""
    cell_sizes: List[int] = field(default_factory=list)
    column_count: int = 0

    @property
    def size_in_bytes(self) -> int:
        return sum(self.cell_sizes)


class RowSampler(ABC):

    @abstractmethod
    def sample(self, scan_spec: ScanSpec, max_rows: int) -> Iterator[SampledRow]:
        """
        Read at most max_rows rows from the key range of the scan, one version per
        cell. The returned iterator is lazy and can be consumed only once.
        """


class ArrowRowSampler(RowSampler):
    """
    Samples rows from an in-memory pyarrow table laid out like a range-sharded
    table: one row key column plus value columns. Null values are not stored
    cells and are skipped.
    """

    def __init__(self, table: pa.Table, row_key: str = DEFAULT_ROW_KEY):
        if row_key not in table.column_names:
            raise ValueError(f"Row key column '{row_key}' not found in {table.column_names}")
        key_type = table.schema.field(row_key).type
        if pa.types.is_string(key_type) or pa.types.is_large_string(key_type):
            index = table.column_names.index(row_key)
            table = table.set_column(index, row_key, table.column(row_key).cast(pa.binary()))
        elif not (pa.types.is_binary(key_type) or pa.types.is_large_binary(key_type)):
            raise ValueError(f"Row key column '{row_key}' must be binary or string, but is {key_type}")
        self.table = table.sort_by(row_key)
        self.row_key = row_key

    def sample(self, scan_spec: ScanSpec, max_rows: int) -> Iterator[SampledRow]:
        data = self._restrict_to_range(scan_spec).slice(0, max_rows)
        value_fields = [f for f in data.schema if f.name != self.row_key]
        for batch in data.to_batches():
            keys = batch.column(self.row_key).to_pylist()
            columns = [(f.type, batch.column(f.name).to_pylist()) for f in value_fields]
            for i, key in enumerate(keys):
                cell_sizes = []
                for data_type, values in columns:
                    value = values[i]
                    if value is None:
                        continue
                    cell_sizes.append(len(key) + _value_size(value, data_type))
                yield SampledRow(cell_sizes=cell_sizes, column_count=len(cell_sizes))

    def _restrict_to_range(self, scan_spec: ScanSpec) -> pa.Table:
        keys = self.table.column(self.row_key)
        mask = None
        if scan_spec.start_row:
            mask = pc.greater_equal(keys, pa.scalar(scan_spec.start_row, type=keys.type))
        if scan_spec.stop_row:
            upper = pc.less(keys, pa.scalar(scan_spec.stop_row, type=keys.type))
            mask = upper if mask is None else pc.and_(mask, upper)
        return self.table if mask is None else self.table.filter(mask)


def _value_size(value, data_type: pa.DataType) -> int:
    if isinstance(value, (bytes, bytearray)):
        return len(value)
    if isinstance(value, str):
        return len(value.encode('utf-8'))
    try:
        return max(1, data_type.bit_width // 8)
    except ValueError:
        # nested or otherwise variable-width value
        return len(str(value).encode('utf-8'))
