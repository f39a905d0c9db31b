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

from pyrangescan.catalog.cluster_status import ClusterStatusProvider
from pyrangescan.catalog.partition_catalog import PartitionCatalog
from pyrangescan.common.options.scan_options import ScanOptions
from pyrangescan.read.plan_node import RangeScanPlanNode
from pyrangescan.read.row_sampler import RowSampler
from pyrangescan.read.scan_spec import ScanSpec


class ScanPlanBuilder:
    """Collects the parameters of a range scan and builds its plan node."""

    def __init__(self,
                 catalog: PartitionCatalog,
                 sampler: RowSampler,
                 cluster_status: Optional[ClusterStatusProvider] = None,
                 options: Optional[dict] = None):
        self.catalog = catalog
        self.sampler = sampler
        self.cluster_status = cluster_status
        self.options = dict(options or {})
        self._start_row: bytes = b''
        self._stop_row: bytes = b''
        self._serialized_filter: Optional[bytes] = None
        self._projection: Optional[List[str]] = None

    def with_start_row(self, start_row: bytes) -> 'ScanPlanBuilder':
        self._start_row = start_row or b''
        return self

    def with_stop_row(self, stop_row: bytes) -> 'ScanPlanBuilder':
        """
        Set the exclusive upper bound of the scan. An empty value scans to the end
        of the table.
        """
        self._stop_row = stop_row or b''
        return self

    def with_filter(self, serialized_filter: bytes) -> 'ScanPlanBuilder':
        self._serialized_filter = serialized_filter
        return self

    def with_projection(self, projection: List[str]) -> 'ScanPlanBuilder':
        self._projection = projection
        return self

    def with_option(self, key: str, value) -> 'ScanPlanBuilder':
        self.options[key] = value
        return self

    def new_scan_spec(self, table_name: str) -> ScanSpec:
        if self._start_row and self._stop_row and self._start_row >= self._stop_row:
            raise ValueError(
                f"Start row {self._start_row!r} must be less than stop row {self._stop_row!r}")
        return ScanSpec(table_name, self._start_row, self._stop_row, self._serialized_filter)

    def build(self, table_name: str) -> RangeScanPlanNode:
        return RangeScanPlanNode.create(
            catalog=self.catalog,
            scan_spec=self.new_scan_spec(table_name),
            sampler=self.sampler,
            cluster_status=self.cluster_status,
            columns=self._projection,
            options=ScanOptions.from_dict(dict(self.options)),
        )
