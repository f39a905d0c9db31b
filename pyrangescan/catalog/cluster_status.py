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

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Dict, List, Optional

from pyrangescan.read.partition import ServerName


@dataclass(frozen=True)
class PartitionLoad:
    """Storage footprint of one partition as reported by its server."""
    partition_id: str
    mem_store_size_mb: int = 0
    store_file_size_mb: int = 0

    @property
    def size_mb(self) -> int:
        return self.mem_store_size_mb + self.store_file_size_mb


class ClusterStatus:
    """Per-server partition loads of the whole cluster at one point in time."""

    def __init__(self, loads: Dict[ServerName, List[PartitionLoad]]):
        self._loads = loads

    def servers(self) -> List[ServerName]:
        return list(self._loads.keys())

    def get_load(self, server: ServerName) -> List[PartitionLoad]:
        return self._loads.get(server, [])


class ClusterStatusProvider(ABC):

    @abstractmethod
    def current_load(self, timeout: Optional[float] = None) -> ClusterStatus:
        """
        Report the per-partition storage footprint of every server. May raise.

        Args:
            timeout: deadline in seconds for the metadata request, None to wait
                indefinitely. Implementations talking to a remote service should
                pass it on as their request deadline.
        """


class StaticClusterStatusProvider(ClusterStatusProvider):
    """Returns a fixed cluster status."""

    def __init__(self, status: ClusterStatus):
        self.status = status

    def current_load(self, timeout: Optional[float] = None) -> ClusterStatus:
        return self.status
