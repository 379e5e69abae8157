"""
Store error taxonomy.

Storage-level failures raised by sqlite3 propagate unchanged; these types
cover the conditions the stores detect themselves.
"""


class StoreError(Exception):
    """Base class for errors detected by the stores"""


class AmbiguousResultError(StoreError):
    """A lookup that must match at most one row matched several"""

    def __init__(self, table: str, column: str, value):
        self.table = table
        self.column = column
        self.value = value
        super().__init__(f"Expected at most one row in {table} where {column} = {value!r}")
