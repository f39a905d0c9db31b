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

from pyrangescan.catalog.catalog_exception import (CatalogException,
                                                   CatalogUnavailableException,
                                                   SchemaMismatchException,
                                                   TableNotExistException)
from pyrangescan.catalog.cluster_status import (ClusterStatus,
                                                ClusterStatusProvider,
                                                PartitionLoad,
                                                StaticClusterStatusProvider)
from pyrangescan.catalog.partition_catalog import (InMemoryPartitionCatalog,
                                                   PartitionCatalog)
from pyrangescan.common.options.scan_options import ScanOptions
from pyrangescan.read.cost_model import CostModel, EndpointAffinity, ScanStats
from pyrangescan.read.partition import Partition, PartitionLocation, ServerName
from pyrangescan.read.partition_planner import PartitionPlanner, SlotAssignment
from pyrangescan.read.plan_node import PlanNode, RangeScanPlanNode, SubScan
from pyrangescan.read.row_sampler import ArrowRowSampler, RowSampler, SampledRow
from pyrangescan.read.scan_plan_builder import ScanPlanBuilder
from pyrangescan.read.scan_spec import ScanSpec, SubScanSpec
from pyrangescan.read.stats_estimator import StatsEstimator, StatsSnapshot
from pyrangescan.read.worker_endpoint import WorkerEndpoint
from pyrangescan.schema.table_schema import TableSchema

__all__ = [
    'ArrowRowSampler',
    'CatalogException',
    'CatalogUnavailableException',
    'ClusterStatus',
    'ClusterStatusProvider',
    'CostModel',
    'EndpointAffinity',
    'InMemoryPartitionCatalog',
    'Partition',
    'PartitionCatalog',
    'PartitionLoad',
    'PartitionLocation',
    'PartitionPlanner',
    'PlanNode',
    'RangeScanPlanNode',
    'RowSampler',
    'SampledRow',
    'ScanOptions',
    'ScanPlanBuilder',
    'ScanSpec',
    'ScanStats',
    'SchemaMismatchException',
    'ServerName',
    'SlotAssignment',
    'StaticClusterStatusProvider',
    'StatsEstimator',
    'StatsSnapshot',
    'SubScan',
    'SubScanSpec',
    'TableNotExistException',
    'TableSchema',
    'WorkerEndpoint',
]
