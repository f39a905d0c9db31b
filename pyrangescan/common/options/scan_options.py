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
from datetime import timedelta

from pyrangescan.common.options import Options
from pyrangescan.common.options.config_option import ConfigOption
from pyrangescan.common.options.config_options import ConfigOptions


class ScanOptions:
    """Options consumed while planning a range scan."""

    SCAN_SAMPLE_ROWS_COUNT: ConfigOption[int] = (
        ConfigOptions.key("scan.sample-rows.count")
        .int_type()
        .default_value(100)
        .with_description(
            "Maximum number of rows sampled from the scan range to estimate the average "
            "row size and column count. 0 disables sampling."
        )
    )

    SIZE_CALCULATOR_ENABLED: ConfigOption[bool] = (
        ConfigOptions.key("size-calculator.enabled")
        .boolean_type()
        .default_value(False)
        .with_description(
            "Whether to query the cluster status for per-partition storage sizes. When disabled, "
            "every partition is assumed to hold a fixed default number of rows."
        )
    )

    CLUSTER_STATUS_TIMEOUT: ConfigOption[timedelta] = (
        ConfigOptions.key("cluster-status.timeout")
        .duration_type()
        .default_value(timedelta(seconds=30))
        .with_description("Upper bound on the wait for a cluster status report.")
    )

    SCAN_FILTER_SELECTIVITY: ConfigOption[float] = (
        ConfigOptions.key("scan.filter-selectivity")
        .double_type()
        .default_value(0.5)
        .with_description("Fraction of rows assumed to survive a pushed-down filter.")
    )

    def __init__(self, options: Options):
        self.options = options

    def set(self, key: ConfigOption, value):
        self.options.set(key, value)

    @staticmethod
    def copy(options: 'ScanOptions') -> 'ScanOptions':
        return ScanOptions(options.options.copy())

    @staticmethod
    def from_dict(options: dict) -> 'ScanOptions':
        return ScanOptions(Options(options))

    def sample_rows_count(self, default=None) -> int:
        count = self.options.get(ScanOptions.SCAN_SAMPLE_ROWS_COUNT, default)
        if count < 0:
            raise ValueError(
                f"{ScanOptions.SCAN_SAMPLE_ROWS_COUNT.key()} must not be negative, but is {count}")
        return count

    def size_calculator_enabled(self, default=None) -> bool:
        return self.options.get(ScanOptions.SIZE_CALCULATOR_ENABLED, default)

    def cluster_status_timeout(self, default=None) -> timedelta:
        return self.options.get(ScanOptions.CLUSTER_STATUS_TIMEOUT, default)

    def filter_selectivity(self, default=None) -> float:
        selectivity = self.options.get(ScanOptions.SCAN_FILTER_SELECTIVITY, default)
        if not 0.0 <= selectivity <= 1.0:
            raise ValueError(
                f"{ScanOptions.SCAN_FILTER_SELECTIVITY.key()} must be within [0, 1], but is {selectivity}")
        return selectivity
