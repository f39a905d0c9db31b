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

import itertools
import logging
import threading
import time
from dataclasses import dataclass
from types import MappingProxyType
from typing import Dict, Iterable, Mapping, Optional, Tuple

from pyrangescan.catalog.cluster_status import ClusterStatus, ClusterStatusProvider
from pyrangescan.common.memory_size import MemorySize
from pyrangescan.common.options.scan_options import ScanOptions
from pyrangescan.read.row_sampler import RowSampler
from pyrangescan.read.scan_spec import ScanSpec

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StatsSnapshot:
    """
    Row size, column density and per-partition size estimates of one scan.
    size_map is None when partition sizes were never collected and read-only otherwise.
    """
    avg_row_size_bytes: int = 1
    avg_cols_per_row: int = 1
    size_map: Optional[Mapping[str, int]] = None

    def __post_init__(self):
        if self.size_map is not None:
            object.__setattr__(self, 'size_map', MappingProxyType(dict(self.size_map)))


class StatsEstimator:
    """
    Estimates the size of a scan from a bounded row sample and, when enabled, the
    storage footprint the cluster reports for each partition of the table.

    All work happens in the constructor; the estimator is read-only afterwards.
    """

    DEFAULT_ROW_COUNT = 1024 * 1024
    DEFAULT_SAMPLE_SIZE = 100

    def __init__(self,
                 scan_spec: ScanSpec,
                 partition_ids: Iterable[str],
                 sampler: RowSampler,
                 cluster_status: Optional[ClusterStatusProvider] = None,
                 options: Optional[ScanOptions] = None):
        self.scan_spec = scan_spec
        self.options = options if options is not None else ScanOptions.from_dict({})

        avg_row_size_bytes, avg_cols_per_row = self._sample_rows(sampler)
        size_map = self._calculate_partition_sizes(set(partition_ids), cluster_status)
        self._snapshot = StatsSnapshot(avg_row_size_bytes, avg_cols_per_row, size_map)

    def snapshot(self) -> StatsSnapshot:
        return self._snapshot

    @property
    def avg_row_size_bytes(self) -> int:
        return self._snapshot.avg_row_size_bytes

    @property
    def avg_cols_per_row(self) -> int:
        return self._snapshot.avg_cols_per_row

    def partition_size_bytes(self, partition_id: str) -> int:
        """
        Returns the size of the given partition in bytes, 0 if partition sizes were
        collected but the partition is unknown, or a default of DEFAULT_ROW_COUNT
        average-sized rows if partition sizes were never collected.
        """
        size_map = self._snapshot.size_map
        if size_map is None:
            return self._snapshot.avg_row_size_bytes * self.DEFAULT_ROW_COUNT
        size = size_map.get(partition_id)
        if size is None:
            logger.debug("Unknown partition: %s", partition_id)
            return 0
        return size

    def _sample_rows(self, sampler: RowSampler) -> Tuple[int, int]:
        rows_to_sample = self.options.sample_rows_count()
        if rows_to_sample == 0:
            logger.debug("Row sampling disabled for table %s", self.scan_spec.table_name)
            return 1, 1

        start_time = time.time()
        rows = sampler.sample(self.scan_spec, rows_to_sample)
        row_size_sum = 0
        num_columns_sum = 0
        row_count = 0
        try:
            for row in itertools.islice(rows, rows_to_sample):
                row_size_sum += row.size_in_bytes
                num_columns_sum += row.column_count
                row_count += 1
        finally:
            close = getattr(rows, 'close', None)
            if close is not None:
                close()

        if row_count == 0:
            logger.debug("No rows sampled from table %s", self.scan_spec.table_name)
            return 1, 1

        avg_row_size_bytes = max(1, row_size_sum // row_count)
        avg_cols_per_row = max(1, num_columns_sum // row_count)
        logger.debug("Sampled %d rows of table %s in %.3f s: avg row size %d bytes, %d columns per row",
                     row_count, self.scan_spec.table_name, time.time() - start_time,
                     avg_row_size_bytes, avg_cols_per_row)
        return avg_row_size_bytes, avg_cols_per_row

    def _calculate_partition_sizes(self, table_partitions: set,
                                   provider: Optional[ClusterStatusProvider]) -> Optional[Dict[str, int]]:
        if not self.options.size_calculator_enabled() or provider is None:
            logger.info("Partition size calculation disabled.")
            return None

        table_name = self.scan_spec.table_name
        logger.info("Calculating partition sizes for table \"%s\".", table_name)
        status = self._fetch_cluster_status(provider)
        if status is None:
            return None

        size_map = {}
        for server in status.servers():
            for load in status.get_load(server):
                if load.partition_id not in table_partitions:
                    continue
                size_mb = load.size_mb
                size_map[load.partition_id] = MemorySize.of_mebi_bytes(max(1, size_mb)).get_bytes()
                logger.debug("Partition %s on %s has size %dMB", load.partition_id, server, size_mb)
        logger.debug("Partition sizes calculated for %d partitions of table %s", len(size_map), table_name)
        return size_map

    def _fetch_cluster_status(self, provider: ClusterStatusProvider) -> Optional[ClusterStatus]:
        timeout = self.options.cluster_status_timeout()
        result = {}

        def fetch():
            try:
                result['status'] = provider.current_load(timeout.total_seconds())
            except Exception as e:
                result['error'] = e

        # Daemon thread: a provider that never returns must not keep the process alive.
        fetch_thread = threading.Thread(target=fetch, name="cluster-status")
        fetch_thread.daemon = True
        fetch_thread.start()
        fetch_thread.join(timeout.total_seconds())

        if fetch_thread.is_alive():
            logger.warning("Cluster status not available within %s, using default partition sizes", timeout)
            return None
        if 'error' in result:
            logger.warning("Failed to get cluster status, using default partition sizes: %s", result['error'])
            return None
        return result['status']
