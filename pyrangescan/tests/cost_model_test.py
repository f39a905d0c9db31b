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

import unittest

from pyrangescan.common.options.scan_options import ScanOptions
from pyrangescan.read.cost_model import CostModel, EndpointAffinity, ScanStats
from pyrangescan.read.partition import Partition, PartitionLocation, ServerName
from pyrangescan.read.scan_spec import ScanSpec
from pyrangescan.read.stats_estimator import StatsSnapshot
from pyrangescan.read.worker_endpoint import WorkerEndpoint


class CostModelTest(unittest.TestCase):

    def setUp(self):
        self.stats = StatsSnapshot(avg_row_size_bytes=10, avg_cols_per_row=4)

    def test_row_count_without_filter(self):
        model = CostModel(ScanSpec('t'), self.stats, 1005)
        self.assertEqual(100, model.row_count_estimate())

    def test_row_count_with_filter(self):
        model = CostModel(ScanSpec('t', serialized_filter=b'\x01'), self.stats, 1000)
        self.assertEqual(50, model.row_count_estimate())

        options = ScanOptions.from_dict({'scan.filter-selectivity': 0.1})
        model = CostModel(ScanSpec('t', serialized_filter=b'\x01'), self.stats, 1000, options)
        self.assertEqual(10, model.row_count_estimate())

    def test_disk_cost(self):
        model = CostModel(ScanSpec('t'), self.stats, 1000)
        self.assertEqual(1000.0, model.disk_cost_estimate(None))
        self.assertEqual(1000.0, model.disk_cost_estimate([]))
        self.assertEqual(1000.0, model.disk_cost_estimate(['*']))
        self.assertEqual(500.0, model.disk_cost_estimate(['a', 'b']))
        self.assertEqual(250.0, model.disk_cost_estimate(['a']))

    def test_scan_stats(self):
        model = CostModel(ScanSpec('t'), self.stats, 1000)
        self.assertEqual(ScanStats(100, 750.0, 1.0, False), model.scan_stats(['a', 'b', 'c']))

    def test_empty_scan(self):
        model = CostModel(ScanSpec('t'), StatsSnapshot(), 0)
        self.assertEqual(ScanStats(0, 0.0), model.scan_stats())

    def test_endpoint_affinities(self):
        locations = [
            PartitionLocation(Partition(f"p{i}", 't', b'%d' % i), ServerName(host))
            for i, host in enumerate(['a', 'a', 'b', 'remote'])
        ]
        endpoints = [
            WorkerEndpoint('b', 1),
            WorkerEndpoint('a', 1),
            WorkerEndpoint('a', 2),
            WorkerEndpoint('c', 1),
        ]

        affinities = CostModel.endpoint_affinities(locations, endpoints)

        self.assertEqual([
            EndpointAffinity(WorkerEndpoint('b', 1), 1),
            EndpointAffinity(WorkerEndpoint('a', 1), 2),
        ], affinities)

    def test_no_affinity(self):
        locations = [PartitionLocation(Partition('p0', 't'), ServerName('storage'))]
        self.assertEqual([], CostModel.endpoint_affinities(locations, [WorkerEndpoint('worker')]))


if __name__ == '__main__':
    unittest.main()
