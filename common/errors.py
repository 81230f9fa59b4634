from __future__ import annotations


class CorrelationModelError(Exception):
    """
    Base failure raised by the correlation model.

    Attributes:
        message: human-readable description.
        function: label of the operation that failed,
                  e.g. "LinearDecayCorrelationModel.get_correlation_coefficient".
    """

    def __init__(self, message: str, function: str = "") -> None:
        super().__init__(message)
        self.message = message
        self.function = function

    def __str__(self) -> str:
        if self.function:
            return f"{self.function}: {self.message}"
        return self.message


class IndexOutOfRangeError(CorrelationModelError, IndexError):
    """Sensor-model-parameter or correlation-group index outside its valid range."""


class InvalidInputError(CorrelationModelError, ValueError):
    """Malformed curve data, or a query against a group with no curve."""
