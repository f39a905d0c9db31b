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
from typing import Dict, List, Optional, Sequence

from pyrangescan.common.options.scan_options import ScanOptions
from pyrangescan.read.partition import PartitionLocation
from pyrangescan.read.scan_spec import ScanSpec
from pyrangescan.read.stats_estimator import StatsSnapshot
from pyrangescan.read.worker_endpoint import WorkerEndpoint
from pyrangescan.schema.table_schema import is_star_query


@dataclass(frozen=True)
class ScanStats:
    """Cost estimate handed to the optimizer. Row counts are never exact."""
    row_count_estimate: int
    disk_cost_estimate: float
    cpu_cost: float = 1.0
    exact: bool = False


@dataclass
class EndpointAffinity:
    """Number of partitions whose server shares a host with the endpoint."""
    endpoint: WorkerEndpoint
    affinity: float = 0.0

    def add_affinity(self, affinity: float):
        self.affinity += affinity


class CostModel:

    def __init__(self, scan_spec: ScanSpec, stats: StatsSnapshot, total_scan_bytes: int,
                 options: Optional[ScanOptions] = None):
        self.scan_spec = scan_spec
        self.stats = stats
        self.total_scan_bytes = total_scan_bytes
        self.options = options if options is not None else ScanOptions.from_dict({})

    def row_count_estimate(self) -> int:
        selectivity = self.options.filter_selectivity() if self.scan_spec.has_filter() else 1.0
        return int((self.total_scan_bytes // self.stats.avg_row_size_bytes) * selectivity)

    def disk_cost_estimate(self, columns: Optional[List[str]] = None) -> float:
        # Approximate: a projected column may stand for a whole column family.
        if is_star_query(columns):
            return float(self.total_scan_bytes)
        return self.total_scan_bytes * (len(columns) / self.stats.avg_cols_per_row)

    def scan_stats(self, columns: Optional[List[str]] = None) -> ScanStats:
        return ScanStats(
            row_count_estimate=self.row_count_estimate(),
            disk_cost_estimate=self.disk_cost_estimate(columns),
        )

    @staticmethod
    def endpoint_affinities(locations: Sequence[PartitionLocation],
                            endpoints: Sequence[WorkerEndpoint]) -> List[EndpointAffinity]:
        endpoint_map: Dict[str, WorkerEndpoint] = {}
        for endpoint in endpoints:
            endpoint_map.setdefault(endpoint.address, endpoint)

        affinity_map: Dict[WorkerEndpoint, EndpointAffinity] = {}
        for location in locations:
            endpoint = endpoint_map.get(location.host_name)
            if endpoint is None:
                continue
            affinity = affinity_map.get(endpoint)
            if affinity is None:
                affinity_map[endpoint] = EndpointAffinity(endpoint, 1)
            else:
                affinity.add_affinity(1)
        return [affinity_map[endpoint] for endpoint in endpoint_map.values() if endpoint in affinity_map]
