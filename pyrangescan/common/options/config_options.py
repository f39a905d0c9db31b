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
from typing import Generic, Type, TypeVar

from pyrangescan.common.options.config_option import ConfigOption

T = TypeVar('T')


class ConfigOptions:
    """
    ConfigOptions are used to build a ConfigOption. The option is typically built in
    one of the following pattern:

    Examples:
        # simple integer-valued option with a default value
        sample_rows = ConfigOptions.key("scan.sample-rows.count").int_type().default_value(100)

        # duration-valued option
        timeout = ConfigOptions.key("cluster-status.timeout").duration_type().default_value(
            timedelta(seconds=30))
    """

    @staticmethod
    def key(key: str) -> 'OptionBuilder':
        """
        Starts building a new ConfigOption.

        Args:
            key: The key for the config option.

        Returns:
            The builder for the config option with the given key.
        """
        if not key:
            raise ValueError("Key must not be None or empty.")
        return ConfigOptions.OptionBuilder(key)

    class OptionBuilder:
        """Chooses the value type of the option under construction."""

        def __init__(self, key: str):
            self.key = key

        def boolean_type(self) -> 'TypedConfigOptionBuilder[bool]':
            return ConfigOptions.TypedConfigOptionBuilder(self.key, bool)

        def int_type(self) -> 'TypedConfigOptionBuilder[int]':
            return ConfigOptions.TypedConfigOptionBuilder(self.key, int)

        def double_type(self) -> 'TypedConfigOptionBuilder[float]':
            return ConfigOptions.TypedConfigOptionBuilder(self.key, float)

        def string_type(self) -> 'TypedConfigOptionBuilder[str]':
            return ConfigOptions.TypedConfigOptionBuilder(self.key, str)

        def duration_type(self) -> 'TypedConfigOptionBuilder[timedelta]':
            return ConfigOptions.TypedConfigOptionBuilder(self.key, timedelta)

    class TypedConfigOptionBuilder(Generic[T]):
        """
        Builder for ConfigOption with a defined atomic type.
        """

        def __init__(self, key: str, clazz: Type[T]):
            self.key = key
            self.clazz = clazz

        def default_value(self, value: T) -> ConfigOption[T]:
            """
            Creates a ConfigOption with the given default value.

            Args:
                value: The default value for the config option

            Returns:
                The config option with the default value.
            """
            return ConfigOption(
                key=self.key,
                clazz=self.clazz,
                description=ConfigOption.EMPTY_DESCRIPTION,
                default_value=value
            )

        def no_default_value(self) -> ConfigOption[T]:
            return ConfigOption(
                key=self.key,
                clazz=self.clazz,
                description=ConfigOption.EMPTY_DESCRIPTION,
                default_value=None
            )
