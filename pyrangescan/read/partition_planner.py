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

import heapq
import logging
import time
from collections import deque
from typing import Deque, Dict, Iterator, List, Sequence, Tuple

from pyroaring import BitMap

from pyrangescan.read.partition import PartitionLocation, sort_locations
from pyrangescan.read.scan_spec import ScanSpec, SubScanSpec
from pyrangescan.read.worker_endpoint import WorkerEndpoint

logger = logging.getLogger(__name__)


class SlotAssignment:
    """Maps each execution slot index to the ordered sub-scans it has to run."""

    def __init__(self, slots: List[List[SubScanSpec]]):
        self._slots = [tuple(specs) for specs in slots]

    @property
    def slot_count(self) -> int:
        return len(self._slots)

    def get(self, slot_index: int) -> List[SubScanSpec]:
        if not 0 <= slot_index < len(self._slots):
            raise IndexError(
                f"Mappings length [{len(self._slots)}] should be greater than slot index [{slot_index}] but it isn't.")
        return list(self._slots[slot_index])

    def counts(self) -> List[int]:
        return [len(specs) for specs in self._slots]

    def items(self) -> Iterator[Tuple[int, List[SubScanSpec]]]:
        for slot_index, specs in enumerate(self._slots):
            yield slot_index, list(specs)

    def __len__(self) -> int:
        return len(self._slots)

    def __eq__(self, other) -> bool:
        if not isinstance(other, SlotAssignment):
            return False
        return self._slots == other._slots

    def __repr__(self) -> str:
        return "SlotAssignment({%s})" % ", ".join(
            f"{slot_index}: {list(specs)}" for slot_index, specs in enumerate(self._slots))


class _SlotArena:
    """
    Per-slot lists of partition indices. Every partition index lives in exactly one
    list; moves between slots go through this object only.
    """

    def __init__(self, locations: List[PartitionLocation], endpoints: Sequence[WorkerEndpoint]):
        self.locations = locations
        self.endpoints = list(endpoints)
        self.slots: List[List[int]] = [[] for _ in self.endpoints]
        # hostname -> slot indices on that host, in endpoint order
        self.host_slots: Dict[str, Deque[int]] = {}
        for slot_index, endpoint in enumerate(self.endpoints):
            self.host_slots.setdefault(endpoint.address, deque()).append(slot_index)

    def count(self, slot_index: int) -> int:
        return len(self.slots[slot_index])

    def add(self, slot_index: int, partition_index: int):
        self.slots[slot_index].append(partition_index)

    def move_one(self, donor: int, receiver: int) -> int:
        """Moves the most recently added partition of donor to receiver."""
        partition_index = self.slots[donor].pop()
        self.slots[receiver].append(partition_index)
        return partition_index

    def describe(self) -> Dict[int, List[str]]:
        return {
            slot_index: [self.locations[p].partition.partition_id for p in partitions]
            for slot_index, partitions in enumerate(self.slots)
        }


class PartitionPlanner:
    """
    Distributes the partitions of a scan over execution slots.

    Partitions whose server runs on the same host as a slot go to that slot first,
    cycling over co-located slots. The remaining partitions fill the least loaded
    slots, and a final rebalancing pass moves partitions until every slot holds
    between floor(P/N) and ceil(P/N) of them. The result depends only on the
    inputs: partitions are ordered by start key before assignment.
    """

    def __init__(self, scan_spec: ScanSpec):
        self.scan_spec = scan_spec

    def assign(self, locations: Sequence[PartitionLocation],
               endpoints: Sequence[WorkerEndpoint]) -> SlotAssignment:
        num_slots = len(endpoints)
        num_partitions = len(locations)
        if num_slots == 0:
            raise ValueError("At least one endpoint is required to assign scan partitions")
        if num_slots > num_partitions:
            raise ValueError(
                f"Incoming endpoints {num_slots} is greater than number of scan partitions {num_partitions}")
        partition_ids = [location.partition.partition_id for location in locations]
        if len(set(partition_ids)) != num_partitions:
            raise ValueError(f"Partitions must be unique, got {partition_ids}")

        start_time = time.perf_counter()
        min_per_slot = num_partitions // num_slots
        max_per_slot = -(-num_partitions // num_slots)

        arena = _SlotArena(sort_locations(locations), endpoints)
        resolved = self._assign_by_affinity(arena)
        self._assign_remaining(arena, resolved, max_per_slot)
        self._rebalance(arena, min_per_slot, max_per_slot)

        if any(not partitions for partitions in arena.slots):
            raise AssertionError(
                f"Unable to assign tasks to some endpoints.\nEndpoints: {list(endpoints)}.\n"
                f"Assignment Map: {arena.describe()}.")

        assignment = SlotAssignment([
            [self.scan_spec.to_sub_scan_spec(arena.locations[p]) for p in partitions]
            for partitions in arena.slots
        ])
        logger.debug("Built assignment map in %d µs.\nEndpoints: %s.\nAssignment Map: %s",
                     (time.perf_counter() - start_time) * 1_000_000, list(endpoints), arena.describe())
        return assignment

    @staticmethod
    def _assign_by_affinity(arena: _SlotArena) -> BitMap:
        """Routes each partition hosted on a slot's host to that host's slots, round robin."""
        resolved = BitMap()
        for partition_index, location in enumerate(arena.locations):
            host_queue = arena.host_slots.get(location.host_name)
            if host_queue is None:
                continue
            slot_index = host_queue.popleft()
            arena.add(slot_index, partition_index)
            host_queue.append(slot_index)
            resolved.add(partition_index)
        return resolved

    @staticmethod
    def _assign_remaining(arena: _SlotArena, resolved: BitMap, max_per_slot: int):
        """Gives every unresolved partition to the slot with the fewest partitions."""
        # Slots at or above max_per_slot hold at least N * max_per_slot >= P partitions
        # together, so the heap cannot run dry while partitions remain.
        min_heap = [(arena.count(i), i) for i in range(len(arena.slots)) if arena.count(i) < max_per_slot]
        heapq.heapify(min_heap)
        for partition_index in range(len(arena.locations)):
            if partition_index in resolved:
                continue
            count, slot_index = heapq.heappop(min_heap)
            arena.add(slot_index, partition_index)
            if count + 1 < max_per_slot:
                heapq.heappush(min_heap, (count + 1, slot_index))

    @staticmethod
    def _rebalance(arena: _SlotArena, min_per_slot: int, max_per_slot: int):
        """Moves partitions from the fullest to the emptiest slots until all counts are balanced."""
        min_heap: List[Tuple[int, int]] = []
        max_heap: List[Tuple[int, int]] = []

        def offer(slot_index: int):
            count = arena.count(slot_index)
            if count < max_per_slot:
                heapq.heappush(min_heap, (count, slot_index))
            if count > min_per_slot:
                heapq.heappush(max_heap, (-count, slot_index))

        for i in range(len(arena.slots)):
            offer(i)

        while min_heap and max_heap and (min_heap[0][0] < min_per_slot or -max_heap[0][0] > max_per_slot):
            _, smallest = heapq.heappop(min_heap)
            _, largest = heapq.heappop(max_heap)
            moved = arena.move_one(largest, smallest)
            logger.debug("Moved partition %s from slot %d to slot %d",
                         arena.locations[moved].partition.partition_id, largest, smallest)
            offer(largest)
            offer(smallest)
