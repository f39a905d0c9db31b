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

import logging
from abc import ABC, abstractmethod
from typing import Dict, List

from pyrangescan.catalog.catalog_exception import (CatalogUnavailableException,
                                                   TableNotExistException)
from pyrangescan.read.partition import PartitionLocation, sort_locations
from pyrangescan.read.scan_spec import ScanSpec
from pyrangescan.schema.table_schema import TableSchema

logger = logging.getLogger(__name__)


class PartitionCatalog(ABC):
    """
    This interface is responsible for resolving a table and the bounds of a scan
    into the partitions to read and the servers currently hosting them.
    """

    @abstractmethod
    def list_partitions(self, table_name: str, scan_spec: ScanSpec) -> List[PartitionLocation]:
        """
        List the partitions of the table that intersect the scan bounds, ordered by
        start key.

        Raises:
            CatalogUnavailableException: if the metadata service is unreachable.
            TableNotExistException: if the table is unknown.
        """

    @abstractmethod
    def partition_ids(self, table_name: str) -> List[str]:
        """All partition ids of the table, regardless of scan bounds."""

    @abstractmethod
    def get_table_schema(self, table_name: str) -> TableSchema:
        """Get the schema of the table."""


class InMemoryPartitionCatalog(PartitionCatalog):
    """Partition catalog holding a fixed snapshot of table layouts."""

    def __init__(self):
        self._schemas: Dict[str, TableSchema] = {}
        self._locations: Dict[str, List[PartitionLocation]] = {}
        self._available = True

    def register_table(self, schema: TableSchema, locations: List[PartitionLocation]):
        for location in locations:
            if location.partition.table_name != schema.table_name:
                raise ValueError(
                    f"Partition {location.partition.partition_id} belongs to table "
                    f"{location.partition.table_name}, not {schema.table_name}")
        ids = [location.partition.partition_id for location in locations]
        if len(set(ids)) != len(ids):
            raise ValueError(f"Duplicate partition ids for table {schema.table_name}: {ids}")
        self._schemas[schema.table_name] = schema
        self._locations[schema.table_name] = sort_locations(locations)

    def set_available(self, available: bool):
        self._available = available

    def list_partitions(self, table_name: str, scan_spec: ScanSpec) -> List[PartitionLocation]:
        locations = self._table_locations(table_name)
        selected = [
            location for location in locations
            if location.partition.intersects(scan_spec.start_row, scan_spec.stop_row)
        ]
        logger.debug("Table %s: %d of %d partitions intersect the scan range",
                     table_name, len(selected), len(locations))
        return selected

    def partition_ids(self, table_name: str) -> List[str]:
        return [location.partition.partition_id for location in self._table_locations(table_name)]

    def get_table_schema(self, table_name: str) -> TableSchema:
        self._check_available()
        if table_name not in self._schemas:
            raise TableNotExistException(table_name)
        return self._schemas[table_name]

    def _table_locations(self, table_name: str) -> List[PartitionLocation]:
        self._check_available()
        if table_name not in self._locations:
            raise TableNotExistException(table_name)
        return self._locations[table_name]

    def _check_available(self):
        if not self._available:
            raise CatalogUnavailableException("Partition metadata service is unavailable")
