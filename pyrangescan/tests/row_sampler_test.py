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

import pyarrow as pa

from pyrangescan.read.row_sampler import ArrowRowSampler, SampledRow
from pyrangescan.read.scan_spec import ScanSpec


class ArrowRowSamplerTest(unittest.TestCase):

    def setUp(self):
        self.table = pa.Table.from_pydict({
            'row_key': ['b', 'a', 'c', 'd'],
            'amount': pa.array([1, 2, 3, None], type=pa.int64()),
            'name': ['xx', None, 'yyy', 'z'],
        })
        self.sampler = ArrowRowSampler(self.table)

    def test_sample_whole_table(self):
        rows = list(self.sampler.sample(ScanSpec('t'), 10))
        self.assertEqual([
            SampledRow([9], 1),
            SampledRow([9, 3], 2),
            SampledRow([9, 4], 2),
            SampledRow([2], 1),
        ], rows)
        self.assertEqual(13, rows[2].size_in_bytes)

    def test_sample_key_range(self):
        rows = list(self.sampler.sample(ScanSpec('t', b'b', b'd'), 10))
        self.assertEqual([SampledRow([9, 3], 2), SampledRow([9, 4], 2)], rows)

        rows = list(self.sampler.sample(ScanSpec('t', b'c'), 10))
        self.assertEqual(2, len(rows))

    def test_max_rows(self):
        rows = list(self.sampler.sample(ScanSpec('t', b'b'), 1))
        self.assertEqual([SampledRow([9, 3], 2)], rows)

    def test_binary_row_key(self):
        table = pa.Table.from_pydict({
            'id': pa.array([b'\x02', b'\x01'], type=pa.binary()),
            'payload': pa.array([b'abcd', b'ab'], type=pa.binary()),
        })
        rows = list(ArrowRowSampler(table, row_key='id').sample(ScanSpec('t'), 5))
        self.assertEqual([SampledRow([3], 1), SampledRow([5], 1)], rows)

    def test_invalid_row_key(self):
        with self.assertRaises(ValueError):
            ArrowRowSampler(self.table, row_key='missing')
        with self.assertRaises(ValueError):
            ArrowRowSampler(pa.Table.from_pydict({'row_key': [1, 2]}))


if __name__ == '__main__':
    unittest.main()
