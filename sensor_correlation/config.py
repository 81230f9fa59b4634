from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, List

import yaml

from common.errors import InvalidInputError
from common.logging_setup import get_logger
from sensor_correlation.linear_decay import LinearDecayCorrelationModel


log = get_logger("sensor_correlation.config")

_FN = "sensor_correlation.config.model_from_params"


def load_params(path: str | Path) -> Dict[str, Any]:
    p = Path(path)
    if not p.exists():
        raise FileNotFoundError(f"Params file not found: {p}")
    try:
        with p.open("r") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as exc:
        raise InvalidInputError(f"Malformed params file {p}: {exc}", "sensor_correlation.config.load_params") from exc
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise InvalidInputError("Params file must contain a mapping at top level.", "sensor_correlation.config.load_params")
    return data


def group_names(params: Dict[str, Any]) -> List[str]:
    """Display names of the configured groups, `group<i>` where unnamed."""
    groups = (params.get("correlation") or {}).get("groups") or []
    return [str(g.get("name", f"group{i}")) if isinstance(g, dict) else f"group{i}" for i, g in enumerate(groups)]


def model_from_params(params: Dict[str, Any]) -> LinearDecayCorrelationModel:
    """
    Build a configured model from the `correlation` section of a params dict:

      correlation:
        num_sensor_model_parameters: 6
        groups:
          - name: position
            correlations: [1.0, 0.5, 0.0]
            times: [0.0, 10.0, 20.0]
            parameters: [0, 1, 2]

    Curves go through the model's own validation, so a bad curve raises
    InvalidInputError and a bad parameter index raises IndexOutOfRangeError.
    """
    section = params.get("correlation")
    if not isinstance(section, dict):
        raise InvalidInputError("Missing 'correlation' section.", _FN)
    if "num_sensor_model_parameters" not in section:
        raise InvalidInputError("Missing 'correlation.num_sensor_model_parameters'.", _FN)

    groups = section.get("groups") or []
    if not isinstance(groups, list):
        raise InvalidInputError("'correlation.groups' must be a list.", _FN)

    n_params = section["num_sensor_model_parameters"]
    if isinstance(n_params, bool) or not isinstance(n_params, int):
        raise InvalidInputError("'num_sensor_model_parameters' must be an integer.", _FN)

    model = LinearDecayCorrelationModel(n_params, len(groups))
    for gi, g in enumerate(groups):
        if not isinstance(g, dict):
            raise InvalidInputError(f"Group {gi} must be a mapping.", _FN)
        if "correlations" not in g or "times" not in g:
            raise InvalidInputError(f"Group {gi} needs both 'correlations' and 'times'.", _FN)
        model.set_correlation_group_parameters(gi, g["correlations"], g["times"])
        for param in g.get("parameters") or []:
            model.set_correlation_parameter_group(param, gi)

    log.info(
        "Correlation model configured",
        extra={"extra": {"params": n_params, "groups": len(groups)}},
    )
    return model
