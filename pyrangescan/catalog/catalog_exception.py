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


class CatalogException(Exception):
    """Base catalog exception"""


class CatalogUnavailableException(CatalogException):
    """The partition metadata service could not be reached"""

    def __init__(self, message: str, cause: Exception = None):
        self.cause = cause
        super().__init__(message)


class TableNotExistException(CatalogException):
    """Table not exist exception"""

    def __init__(self, table_name: str):
        self.table_name = table_name
        super().__init__(f"Table {table_name} does not exist")


class SchemaMismatchException(CatalogException):
    """A projected column is not part of the table schema"""

    def __init__(self, table_name: str, column: str):
        self.table_name = table_name
        self.column = column
        super().__init__(f"The column '{column}' does not exist in table: {table_name}")
