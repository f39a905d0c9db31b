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

from dataclasses import dataclass
from typing import Optional

from pyrangescan.read.partition import PartitionLocation


@dataclass(frozen=True)
class SubScanSpec:
    """One partition's realized fragment of a scan, bound to the server owning it."""
    table_name: str
    region_server: str
    start_row: bytes
    stop_row: bytes
    serialized_filter: Optional[bytes] = None


@dataclass(frozen=True)
class ScanSpec:
    """Logical description of a requested scan: table, key bounds and an opaque filter."""
    table_name: str
    start_row: bytes = b''
    stop_row: bytes = b''
    serialized_filter: Optional[bytes] = None

    def has_filter(self) -> bool:
        return self.serialized_filter is not None

    def to_sub_scan_spec(self, location: PartitionLocation) -> SubScanSpec:
        partition = location.partition
        if self.start_row and partition.contains_row(self.start_row):
            start_row = self.start_row
        else:
            start_row = partition.start_key
        if self.stop_row and partition.contains_row(self.stop_row):
            stop_row = self.stop_row
        else:
            stop_row = partition.stop_key
        return SubScanSpec(
            table_name=self.table_name,
            region_server=location.host_name,
            start_row=start_row,
            stop_row=stop_row,
            serialized_filter=self.serialized_filter,
        )
