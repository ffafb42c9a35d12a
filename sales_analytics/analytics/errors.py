"""
Query Engine Errors

Every failure the engine reports is an AnalyticsError. Validation errors are
raised before the record store is touched; store failures wrap whatever the
backing driver raised.
"""


class AnalyticsError(Exception):
    """Base class for recoverable query engine failures"""

    code = "analytics_error"


class InvalidMonthError(AnalyticsError):
    """Month text was supplied but is not one of the twelve month names"""

    code = "invalid_month"

    def __init__(self, month: str):
        self.month = month
        super().__init__(f"Invalid month provided: {month!r}")


class MissingMonthError(AnalyticsError):
    """Operation needs a month and none was supplied"""

    code = "missing_month"

    def __init__(self, operation: str):
        self.operation = operation
        super().__init__(f"Month parameter is required for {operation}")


class StoreFailureError(AnalyticsError):
    """The record store could not answer a query"""

    code = "store_failure"
