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


@dataclass(frozen=True)
class ServerName:
    """Identity of a storage server hosting partitions."""
    host_name: str
    port: int = 0

    def __str__(self) -> str:
        return f"{self.host_name}:{self.port}" if self.port else self.host_name


@dataclass(frozen=True)
class Partition:
    """
    A contiguous key range [start_key, stop_key) of a table. An empty start key
    is unbounded below, an empty stop key is unbounded above.
    """
    partition_id: str
    table_name: str
    start_key: bytes = b''
    stop_key: bytes = b''

    def contains_row(self, row: bytes) -> bool:
        return self.start_key <= row and (not self.stop_key or row < self.stop_key)

    def intersects(self, start_row: bytes, stop_row: bytes) -> bool:
        """Whether this partition overlaps the scan range [start_row, stop_row)."""
        if stop_row and self.start_key >= stop_row:
            return False
        if start_row and self.stop_key and self.stop_key <= start_row:
            return False
        return True

    def sort_key(self):
        return self.start_key, self.partition_id


@dataclass(frozen=True)
class PartitionLocation:
    """A partition together with the server that owned it at discovery time."""
    partition: Partition
    server: ServerName

    @property
    def host_name(self) -> str:
        return self.server.host_name


def sort_locations(locations) -> list:
    return sorted(locations, key=lambda loc: loc.partition.sort_key())
