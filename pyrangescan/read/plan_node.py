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
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

from pyrangescan.catalog.cluster_status import ClusterStatusProvider
from pyrangescan.catalog.partition_catalog import PartitionCatalog
from pyrangescan.common.options.scan_options import ScanOptions
from pyrangescan.read.cost_model import CostModel, EndpointAffinity, ScanStats
from pyrangescan.read.partition import PartitionLocation, sort_locations
from pyrangescan.read.partition_planner import PartitionPlanner, SlotAssignment
from pyrangescan.read.row_sampler import RowSampler
from pyrangescan.read.scan_spec import ScanSpec, SubScanSpec
from pyrangescan.read.stats_estimator import StatsEstimator
from pyrangescan.read.worker_endpoint import WorkerEndpoint
from pyrangescan.schema.table_schema import STAR_COLUMN, TableSchema, is_star_query

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SubScan:
    """The scan work of one execution slot."""
    table_name: str
    columns: Tuple[str, ...]
    specs: Tuple[SubScanSpec, ...]


class PlanNode(ABC):
    """A scan operator as seen by the query planner."""

    @abstractmethod
    def estimate_cost(self) -> ScanStats:
        """Estimate rows and disk cost of the scan."""

    @abstractmethod
    def assign_slots(self, endpoints: Sequence[WorkerEndpoint]) -> SlotAssignment:
        """Distribute the scan over one execution slot per endpoint."""

    @abstractmethod
    def specialize(self, children: List['PlanNode']) -> 'PlanNode':
        """Create a copy of this node with the given children."""

    @abstractmethod
    def operator_affinity(self, endpoints: Sequence[WorkerEndpoint]) -> List[EndpointAffinity]:
        """Preference of this scan for running on each endpoint."""

    @abstractmethod
    def max_parallelization_width(self) -> int:
        """Largest number of slots the scan can be split into."""


class RangeScanPlanNode(PlanNode):
    """
    Plan node scanning a key range of a range-partitioned table. Partitions are
    discovered once at creation; the node is immutable afterwards and copies share
    the discovered partitions and the statistics.
    """

    def __init__(self,
                 scan_spec: ScanSpec,
                 columns: Optional[Sequence[str]],
                 locations: Sequence[PartitionLocation],
                 stats_estimator: StatsEstimator,
                 schema: TableSchema,
                 options: Optional[ScanOptions] = None,
                 filter_pushed_down: bool = False):
        self._scan_spec = scan_spec
        self._columns: Tuple[str, ...] = (STAR_COLUMN,) if is_star_query(columns) else tuple(columns)
        self._locations: Tuple[PartitionLocation, ...] = tuple(sort_locations(locations))
        self._stats_estimator = stats_estimator
        self._schema = schema
        self._options = options if options is not None else ScanOptions.from_dict({})
        self._filter_pushed_down = filter_pushed_down

        self._schema.validate_projection(list(self._columns))
        self._total_scan_bytes = sum(
            stats_estimator.partition_size_bytes(location.partition.partition_id)
            for location in self._locations)
        self._cost_model = CostModel(scan_spec, stats_estimator.snapshot(), self._total_scan_bytes, self._options)

    @staticmethod
    def create(catalog: PartitionCatalog,
               scan_spec: ScanSpec,
               sampler: RowSampler,
               cluster_status: Optional[ClusterStatusProvider] = None,
               columns: Optional[Sequence[str]] = None,
               options: Optional[ScanOptions] = None) -> 'RangeScanPlanNode':
        """
        Discovers the partitions of the scan and estimates its statistics. Catalog
        failures propagate to the caller, a failing cluster status only degrades
        the estimates.
        """
        table_name = scan_spec.table_name
        logger.debug("Getting partition locations for table %s", table_name)
        schema = catalog.get_table_schema(table_name)
        locations = catalog.list_partitions(table_name, scan_spec)
        stats_estimator = StatsEstimator(
            scan_spec, catalog.partition_ids(table_name), sampler, cluster_status, options)
        return RangeScanPlanNode(scan_spec, columns, locations, stats_estimator, schema, options)

    @property
    def scan_spec(self) -> ScanSpec:
        return self._scan_spec

    @property
    def table_name(self) -> str:
        return self._scan_spec.table_name

    @property
    def columns(self) -> List[str]:
        return list(self._columns)

    @property
    def locations(self) -> List[PartitionLocation]:
        return list(self._locations)

    @property
    def stats_estimator(self) -> StatsEstimator:
        return self._stats_estimator

    @property
    def total_scan_bytes(self) -> int:
        return self._total_scan_bytes

    @property
    def filter_pushed_down(self) -> bool:
        """Whether a filter of the query has been folded into the scan spec."""
        return self._filter_pushed_down

    def is_star_query(self) -> bool:
        return is_star_query(list(self._columns))

    def with_columns(self, columns: Optional[Sequence[str]]) -> 'RangeScanPlanNode':
        """A copy of this node projecting the given columns."""
        return RangeScanPlanNode(self._scan_spec, columns, self._locations, self._stats_estimator,
                                 self._schema, self._options, self._filter_pushed_down)

    def with_filter_pushed_down(self, filter_pushed_down: bool = True) -> 'RangeScanPlanNode':
        return RangeScanPlanNode(self._scan_spec, self._columns, self._locations, self._stats_estimator,
                                 self._schema, self._options, filter_pushed_down)

    def can_push_down_projects(self, columns: Optional[Sequence[str]]) -> bool:
        """Projections are always applied by the scan itself."""
        return True

    def estimate_cost(self) -> ScanStats:
        return self._cost_model.scan_stats(list(self._columns))

    def assign_slots(self, endpoints: Sequence[WorkerEndpoint]) -> SlotAssignment:
        return PartitionPlanner(self._scan_spec).assign(self._locations, endpoints)

    def specialize(self, children: List[PlanNode]) -> 'RangeScanPlanNode':
        if children:
            raise ValueError(f"{type(self).__name__} is a leaf node, got {len(children)} children")
        return self.with_columns(self._columns)

    def operator_affinity(self, endpoints: Sequence[WorkerEndpoint]) -> List[EndpointAffinity]:
        return CostModel.endpoint_affinities(self._locations, endpoints)

    def max_parallelization_width(self) -> int:
        return len(self._locations)

    def get_specific_scan(self, assignment: SlotAssignment, slot_index: int) -> SubScan:
        return SubScan(self.table_name, self._columns, tuple(assignment.get(slot_index)))

    def digest(self) -> str:
        return repr(self)

    def __repr__(self) -> str:
        return f"RangeScanPlanNode [ScanSpec={self._scan_spec}, columns={list(self._columns)}]"
