"""
Launcher scripts: command line and catalog directory handed to the child process.
"""
import importlib.util

import pytest

from conftest import PROJECT_ROOT, SAMPLE_DATA_DIR
from detail_pricing.config.settings import DATA_DIR_ENV


def _load_script(name):
    path = PROJECT_ROOT / 'scripts' / f'{name}.py'
    spec = importlib.util.spec_from_file_location(f"script_{name}", path)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


@pytest.fixture
def calls(monkeypatch):
    recorded = []

    def fake_run(cmd, **kwargs):
        recorded.append((cmd, kwargs))

    monkeypatch.setattr("subprocess.run", fake_run)
    monkeypatch.setattr("os.chdir", lambda path: None)
    monkeypatch.delenv(DATA_DIR_ENV, raising=False)
    return recorded


def test_run_api_passes_port_and_data_dir(monkeypatch, calls):
    script = _load_script("run_api")
    monkeypatch.setattr("sys.argv", ["run_api.py", "--port", "9001", "--data-dir", str(SAMPLE_DATA_DIR), "--no-reload"])

    script.main()

    cmd, kwargs = calls[0]
    assert cmd[cmd.index("--port") + 1] == "9001"
    assert "--reload" not in cmd
    assert "detail_pricing.api.main:app" in cmd
    assert kwargs["env"][DATA_DIR_ENV] == str(SAMPLE_DATA_DIR.resolve())


def test_run_api_defaults(monkeypatch, calls):
    script = _load_script("run_api")
    monkeypatch.setattr("sys.argv", ["run_api.py"])

    script.main()

    cmd, kwargs = calls[0]
    assert cmd[cmd.index("--port") + 1] == "8000"
    assert "--reload" in cmd
    assert DATA_DIR_ENV not in kwargs["env"]


def test_run_app_passes_data_dir(monkeypatch, calls):
    script = _load_script("run_app")
    monkeypatch.setattr("sys.argv", ["run_app.py", "-d", str(SAMPLE_DATA_DIR)])

    script.main()

    cmd, kwargs = calls[0]
    assert cmd[-1].endswith("app_streamlit.py")
    assert kwargs["env"][DATA_DIR_ENV] == str(SAMPLE_DATA_DIR.resolve())


def test_missing_data_dir_exits(monkeypatch, calls, tmp_path):
    script = _load_script("run_app")
    monkeypatch.setattr("sys.argv", ["run_app.py", "--data-dir", str(tmp_path / "nope")])

    with pytest.raises(SystemExit):
        script.main()
    assert calls == []
