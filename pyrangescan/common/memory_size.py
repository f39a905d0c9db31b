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

"""
MemorySize is a representation of a number of bytes, viewable in different units.

Storage servers report partition footprints in whole mebibytes, while the
planner works in bytes; this class converts between the two.
"""


class MemorySize:
    """MemorySize is a representation of a number of bytes, viewable in different units."""

    ZERO = None  # Will be set after class definition

    def __init__(self, bytes: int):
        """
        Constructs a new MemorySize.

        Args:
            bytes: The size, in bytes. Must be zero or larger.
        """
        if bytes < 0:
            raise ValueError("bytes must be >= 0")
        self.bytes = bytes

    @staticmethod
    def of_mebi_bytes(mebi_bytes: int) -> 'MemorySize':
        """Create a MemorySize from mebibytes."""
        return MemorySize(mebi_bytes << 20)

    @staticmethod
    def of_bytes(bytes: int) -> 'MemorySize':
        """Create a MemorySize from bytes."""
        return MemorySize(bytes)

    def get_bytes(self) -> int:
        """Gets the memory size in bytes."""
        return self.bytes

    def get_mebi_bytes(self) -> int:
        """Gets the memory size in Mebibytes (= 1024 Kibibytes)."""
        return self.bytes >> 20

    def __eq__(self, other) -> bool:
        if not isinstance(other, MemorySize):
            return False
        return self.bytes == other.bytes

    def __hash__(self) -> int:
        return hash(self.bytes)

    def __str__(self) -> str:
        return self.format_to_string()

    def __repr__(self) -> str:
        return f"MemorySize({self.bytes})"

    def format_to_string(self) -> str:
        """Format using the highest unit that divides the size evenly."""
        if self.bytes == 0:
            return "0 bytes"

        for unit in [MemoryUnit.GIGA_BYTES, MemoryUnit.MEGA_BYTES, MemoryUnit.KILO_BYTES]:
            if self.bytes % unit.multiplier == 0:
                return f"{self.bytes // unit.multiplier} {unit.units[1]}"

        return f"{self.bytes} bytes"


class MemoryUnit:
    """Memory units used when formatting sizes for log output."""

    def __init__(self, units: list, multiplier: int):
        self.units = units
        self.multiplier = multiplier

    BYTES = None  # Will be set after class definition
    KILO_BYTES = None
    MEGA_BYTES = None
    GIGA_BYTES = None


MemoryUnit.BYTES = MemoryUnit(["b", "bytes"], 1)
MemoryUnit.KILO_BYTES = MemoryUnit(["k", "kb", "kibibytes"], 1024)
MemoryUnit.MEGA_BYTES = MemoryUnit(["m", "mb", "mebibytes"], 1024 * 1024)
MemoryUnit.GIGA_BYTES = MemoryUnit(["g", "gb", "gibibytes"], 1024 * 1024 * 1024)

MemorySize.ZERO = MemorySize(0)
