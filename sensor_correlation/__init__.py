# FILE: sensor_correlation/__init__.py
"""
Sensor Correlation — time-decay correlation of sensor-model parameters

This package provides:
- LinearDecayCorrelationModel: assigns sensor-model parameters to correlation
  groups and evaluates each group's piecewise-linear decay curve
- CorrelationCurve: immutable (correlations, times) breakpoint pair
- YAML configuration loading (config.py) and a small table-printing CLI

Entry point:
    python -m sensor_correlation.service --config config/params.yaml
"""
from .linear_decay import CorrelationCurve, LinearDecayCorrelationModel

__all__ = ["CorrelationCurve", "LinearDecayCorrelationModel"]
