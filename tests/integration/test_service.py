"""
Integration tests: params file -> configured model -> CLI decay table
"""

import pytest
import logging
import os
import sys

# Add project root to path
project_root = os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))
sys.path.append(project_root)

from sensor_correlation import service
from sensor_correlation.config import load_params, model_from_params

PARAMS = os.path.join(project_root, "config", "params.yaml")


@pytest.fixture(autouse=True)
def _restore_root_logger():
    """main() reconfigures the root logger onto the captured stderr; undo it"""
    root = logging.getLogger()
    saved = (list(root.handlers), root.level)
    yield
    root.handlers[:] = saved[0]
    root.setLevel(saved[1])


def _table(out):
    """Parse printed rows into {(name, dt): corr}"""
    rows = {}
    for line in out.splitlines()[1:]:
        parts = line.split()
        if len(parts) == 3:
            rows[(parts[0], float(parts[1]))] = float(parts[2])
    return rows


class TestDecayTable:
    """decay_table() on the shipped configuration"""

    def test_all_groups(self):
        model = model_from_params(load_params(PARAMS))
        rows = service.decay_table(model, [0.0, 5.0, 200.0])
        assert [r[0] for r in rows] == [0, 0, 0, 1, 1, 1, 2, 2, 2]
        by_key = {(g, dt): c for g, dt, c in rows}
        assert by_key[(0, 5.0)] == pytest.approx(0.8)
        assert by_key[(0, 200.0)] == pytest.approx(0.2)
        assert by_key[(1, 5.0)] == pytest.approx(0.8)
        assert by_key[(2, 200.0)] == pytest.approx(0.9)

    def test_skips_unset_groups(self):
        model = model_from_params(
            {"correlation": {"num_sensor_model_parameters": 1, "groups": [{"correlations": [], "times": []}]}}
        )
        assert service.decay_table(model, [0.0]) == []


class TestServiceMain:
    """Command line entry point"""

    def test_prints_table(self, capsys):
        rc = service.main(["--config", PARAMS, "--dt", "0,15,60", "--log-level", "ERROR"])
        assert rc == 0
        rows = _table(capsys.readouterr().out)
        assert rows[("position", 0.0)] == pytest.approx(1.0)
        assert rows[("attitude", 15.0)] == pytest.approx(0.6)
        assert rows[("attitude", 60.0)] == pytest.approx(0.0)
        assert rows[("focal", 15.0)] == pytest.approx(0.9)

    def test_single_group_and_pair(self, capsys):
        rc = service.main(["--config", PARAMS, "--group", "0", "--dt", "5", "--pair", "0,2", "--log-level", "ERROR"])
        assert rc == 0
        out = capsys.readouterr().out
        assert "attitude" not in out
        assert "parameters 0,2" in out
        assert out.strip().splitlines()[-1].split() == ["5.000", "0.8000"]

    def test_pair_across_groups_is_zero(self, capsys):
        rc = service.main(["--config", PARAMS, "--group", "2", "--dt", "1", "--pair", "0,3", "--log-level", "ERROR"])
        assert rc == 0
        assert capsys.readouterr().out.strip().splitlines()[-1].split() == ["1.000", "0.0000"]

    def test_bad_group(self, capsys):
        rc = service.main(["--config", PARAMS, "--group", "7", "--log-level", "CRITICAL"])
        assert rc == 1
        assert "group index is out of range" in capsys.readouterr().err

    def test_bad_dt_list(self, capsys):
        assert service.main(["--config", PARAMS, "--dt", "a,b"]) == 2

    def test_missing_config(self, tmp_path, capsys):
        assert service.main(["--config", str(tmp_path / "missing.yaml")]) == 2
        assert "not found" in capsys.readouterr().err

    def test_malformed_config(self, tmp_path, capsys):
        bad = tmp_path / "bad.yaml"
        bad.write_text("correlation: [1, 2\n")
        assert service.main(["--config", str(bad)]) == 2
        err = capsys.readouterr().err
        assert err.startswith("error: ")
        assert "Malformed params file" in err
