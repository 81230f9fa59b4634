"""
Sensor Correlation Test Suite

Structure:
- unit/: model, value types, configuration and logging
- integration/: params file -> model -> CLI output
"""
