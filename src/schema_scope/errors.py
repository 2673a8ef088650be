"""
Custom exceptions for schema filtering
"""


class SchemaScopeError(Exception):
    """Base exception for schema-scope errors"""
    pass


class SchemaLoadError(SchemaScopeError):
    """Raised when a schema document cannot be turned into a schema graph"""
    pass


class ConfigError(SchemaScopeError):
    """Raised when a filter configuration file is invalid"""
    pass


class ClosureError(SchemaScopeError):
    """Raised when neighbouring tables cannot be collected for a table"""

    def __init__(self, table_name: str, message: str = ""):
        self.table_name = table_name
        super().__init__(message or f"failed to collect tables related to '{table_name}'")


class PartitionInvariantError(SchemaScopeError):
    """Raised when included and excluded tables do not add up to the schema"""

    def __init__(self, expected: int, actual: int):
        self.expected = expected
        self.actual = actual
        super().__init__(f"failed to separate tables. expected: {expected}, actual: {actual}")


class SurgeryError(SchemaScopeError):
    """Raised when a table cannot be removed from the schema"""

    def __init__(self, table_name: str):
        self.table_name = table_name
        super().__init__(f"failed to filter table '{table_name}'")
