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

_UNIT_MILLIS = [
    (('ms', 'milli', 'millisecond', 'milliseconds'), 1),
    (('s', 'sec', 'second', 'seconds'), 1000),
    (('m', 'min', 'minute', 'minutes'), 60 * 1000),
    (('h', 'hour', 'hours'), 60 * 60 * 1000),
    (('d', 'day', 'days'), 24 * 60 * 60 * 1000),
]


def parse_duration(text: str) -> timedelta:
    """
    Parses a duration such as "500 ms", "30s" or "2 min". A bare number is
    interpreted as milliseconds.
    """
    if text is None:
        raise ValueError("text cannot be None")

    trimmed = text.strip().lower()
    if not trimmed:
        raise ValueError("argument is an empty- or whitespace-only string")

    pos = 0
    while pos < len(trimmed) and trimmed[pos].isdigit():
        pos += 1

    number_str = trimmed[:pos]
    unit_str = trimmed[pos:].strip()

    if not number_str:
        raise ValueError("text does not start with a number")

    value = int(number_str)
    if not unit_str:
        return timedelta(milliseconds=value)

    for labels, millis in _UNIT_MILLIS:
        if unit_str in labels:
            return timedelta(milliseconds=value * millis)

    supported_units = ', '.join('(' + ' | '.join(labels) + ')' for labels, _ in _UNIT_MILLIS)
    raise ValueError(
        f"Time interval unit label '{unit_str}' does not match any of the recognized units: "
        f"{supported_units}"
    )


def format_duration(duration: timedelta) -> str:
    millis = int(duration.total_seconds() * 1000)
    if millis % 1000 == 0:
        return f"{millis // 1000} s"
    return f"{millis} ms"
