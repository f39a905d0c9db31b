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

import os
import subprocess
import sys
import textwrap
import threading
import time
import unittest
from unittest.mock import Mock

from pyrangescan.catalog.cluster_status import (ClusterStatus,
                                                ClusterStatusProvider,
                                                PartitionLoad,
                                                StaticClusterStatusProvider)
from pyrangescan.common.options.scan_options import ScanOptions
from pyrangescan.read.partition import ServerName
from pyrangescan.read.row_sampler import RowSampler, SampledRow
from pyrangescan.read.scan_spec import ScanSpec
from pyrangescan.read.stats_estimator import StatsEstimator, StatsSnapshot

MB = 1024 * 1024


class _BlockingProvider(ClusterStatusProvider):

    def __init__(self):
        self.release = threading.Event()
        self.timeouts = []

    def current_load(self, timeout=None) -> ClusterStatus:
        self.timeouts.append(timeout)
        self.release.wait(10)
        return ClusterStatus({})


class StatsEstimatorTest(unittest.TestCase):

    def setUp(self):
        self.scan_spec = ScanSpec('orders', b'a', b'z')
        self.rows = [
            SampledRow([10, 20], 2),
            SampledRow([5], 1),
            SampledRow([7, 7, 7], 3),
        ]
        self.sampler = Mock(spec=RowSampler)
        self.sampler.sample.side_effect = lambda spec, max_rows: iter(self.rows)
        self.status = ClusterStatus({
            ServerName('rs1', 16020): [
                PartitionLoad('p0', mem_store_size_mb=1, store_file_size_mb=2),
                PartitionLoad('p1'),
            ],
            ServerName('rs2', 16020): [
                PartitionLoad('other-table-p0', store_file_size_mb=50),
            ],
        })

    def test_averages_from_sample(self):
        estimator = StatsEstimator(self.scan_spec, ['p0'], self.sampler)

        self.sampler.sample.assert_called_once_with(self.scan_spec, 100)
        self.assertEqual(18, estimator.avg_row_size_bytes)
        self.assertEqual(2, estimator.avg_cols_per_row)
        self.assertEqual(StatsSnapshot(18, 2, None), estimator.snapshot())

    def test_sampling_disabled(self):
        options = ScanOptions.from_dict({'scan.sample-rows.count': 0})
        estimator = StatsEstimator(self.scan_spec, ['p0'], self.sampler, options=options)

        self.sampler.sample.assert_not_called()
        self.assertEqual(StatsSnapshot(1, 1, None), estimator.snapshot())

    def test_empty_sample(self):
        self.rows = []
        estimator = StatsEstimator(self.scan_spec, ['p0'], self.sampler)
        self.assertEqual(1, estimator.avg_row_size_bytes)
        self.assertEqual(1, estimator.avg_cols_per_row)

    def test_averages_never_drop_below_one(self):
        self.rows = [SampledRow([], 0), SampledRow([], 0)]
        estimator = StatsEstimator(self.scan_spec, ['p0'], self.sampler)
        self.assertEqual((1, 1), (estimator.avg_row_size_bytes, estimator.avg_cols_per_row))

    def test_sample_is_capped_and_closed(self):
        consumed = []
        closed = []

        def rows(spec, max_rows):
            try:
                for i in range(1000):
                    consumed.append(i)
                    yield SampledRow([100], 1)
            finally:
                closed.append(True)

        self.sampler.sample.side_effect = rows
        options = ScanOptions.from_dict({'scan.sample-rows.count': 5})
        estimator = StatsEstimator(self.scan_spec, ['p0'], self.sampler, options=options)

        self.assertEqual(5, len(consumed))
        self.assertEqual([True], closed)
        self.assertEqual(100, estimator.avg_row_size_bytes)

    def test_sampler_failure_propagates(self):
        self.sampler.sample.side_effect = IOError("scanner lease expired")
        with self.assertRaises(IOError):
            StatsEstimator(self.scan_spec, ['p0'], self.sampler)

    def test_size_map_from_cluster_status(self):
        options = ScanOptions.from_dict({'size-calculator.enabled': 'true'})
        estimator = StatsEstimator(self.scan_spec, ['p0', 'p1', 'p2'], self.sampler,
                                   StaticClusterStatusProvider(self.status), options)

        self.assertEqual({'p0': 3 * MB, 'p1': MB}, dict(estimator.snapshot().size_map))
        self.assertEqual(3 * MB, estimator.partition_size_bytes('p0'))
        self.assertEqual(MB, estimator.partition_size_bytes('p1'))
        self.assertEqual(0, estimator.partition_size_bytes('p2'))
        self.assertEqual(0, estimator.partition_size_bytes('other-table-p0'))

    def test_size_calculation_disabled(self):
        provider = Mock(spec=ClusterStatusProvider)
        with self.assertLogs('pyrangescan.read.stats_estimator', level='INFO') as logs:
            estimator = StatsEstimator(self.scan_spec, ['p0'], self.sampler, provider)

        provider.current_load.assert_not_called()
        self.assertIsNone(estimator.snapshot().size_map)
        self.assertEqual(18 * StatsEstimator.DEFAULT_ROW_COUNT, estimator.partition_size_bytes('p0'))
        self.assertEqual(18 * StatsEstimator.DEFAULT_ROW_COUNT, estimator.partition_size_bytes('unknown'))
        self.assertIn("Partition size calculation disabled.", logs.output[0])

    def test_enabled_without_provider(self):
        options = ScanOptions.from_dict({'size-calculator.enabled': True})
        estimator = StatsEstimator(self.scan_spec, ['p0'], self.sampler, None, options)
        self.assertIsNone(estimator.snapshot().size_map)

    def test_cluster_status_failure_falls_back_to_default(self):
        provider = Mock(spec=ClusterStatusProvider)
        provider.current_load.side_effect = RuntimeError("master is initializing")
        options = ScanOptions.from_dict({'size-calculator.enabled': True})

        with self.assertLogs('pyrangescan.read.stats_estimator', level='WARNING') as logs:
            estimator = StatsEstimator(self.scan_spec, ['p0', 'p1'], self.sampler, provider, options)

        provider.current_load.assert_called_once_with(30.0)
        self.assertIsNone(estimator.snapshot().size_map)
        for partition_id in ('p0', 'p1'):
            self.assertEqual(18 * StatsEstimator.DEFAULT_ROW_COUNT, estimator.partition_size_bytes(partition_id))
        self.assertTrue(any("master is initializing" in line for line in logs.output))

    def test_cluster_status_timeout_falls_back_to_default(self):
        provider = _BlockingProvider()
        options = ScanOptions.from_dict({
            'size-calculator.enabled': True,
            'cluster-status.timeout': '50 ms',
        })
        try:
            with self.assertLogs('pyrangescan.read.stats_estimator', level='WARNING'):
                estimator = StatsEstimator(self.scan_spec, ['p0'], self.sampler, provider, options)
        finally:
            provider.release.set()

        self.assertEqual([0.05], provider.timeouts)
        self.assertIsNone(estimator.snapshot().size_map)
        self.assertEqual(18 * StatsEstimator.DEFAULT_ROW_COUNT, estimator.partition_size_bytes('p0'))

    def test_hung_cluster_status_does_not_block_exit(self):
        script = textwrap.dedent("""
            import threading
            from pyrangescan.catalog.cluster_status import ClusterStatusProvider
            from pyrangescan.common.options.scan_options import ScanOptions
            from pyrangescan.read.row_sampler import RowSampler
            from pyrangescan.read.scan_spec import ScanSpec
            from pyrangescan.read.stats_estimator import StatsEstimator

            class HungProvider(ClusterStatusProvider):
                def current_load(self, timeout=None):
                    threading.Event().wait()

            class NoRows(RowSampler):
                def sample(self, scan_spec, max_rows):
                    return iter([])

            options = ScanOptions.from_dict({
                'size-calculator.enabled': True,
                'cluster-status.timeout': '100 ms',
            })
            estimator = StatsEstimator(ScanSpec('orders'), ['p0'], NoRows(), HungProvider(), options)
            print(estimator.snapshot().size_map)
        """)
        project_root = os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))
        env = dict(os.environ)
        env['PYTHONPATH'] = os.pathsep.join(p for p in (project_root, env.get('PYTHONPATH')) if p)

        start_time = time.time()
        completed = subprocess.run([sys.executable, '-c', script], env=env, capture_output=True,
                                   text=True, timeout=30)
        elapsed = time.time() - start_time

        self.assertEqual(0, completed.returncode, completed.stderr)
        self.assertEqual("None", completed.stdout.strip())
        self.assertLess(elapsed, 10)

    def test_snapshot_size_map_is_read_only(self):
        options = ScanOptions.from_dict({'size-calculator.enabled': True})
        estimator = StatsEstimator(self.scan_spec, ['p0', 'p1'], self.sampler,
                                   StaticClusterStatusProvider(self.status), options)

        with self.assertRaises(TypeError):
            estimator.snapshot().size_map['p0'] = 0
        self.assertEqual(3 * MB, estimator.partition_size_bytes('p0'))

        sizes = {'p0': 10}
        snapshot = StatsSnapshot(5, 2, sizes)
        sizes['p0'] = 20
        self.assertEqual(10, snapshot.size_map['p0'])


if __name__ == '__main__':
    unittest.main()
