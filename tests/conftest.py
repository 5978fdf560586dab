import subprocess
import sys
import textwrap
from collections.abc import Callable
from pathlib import Path

import pytest

from testrelay.config import ProjectConfig, RelayConfig, ReportsConfig, RunnerConfig

# A stand-in for the external runner. Listing mode prints a banner and
# indented test entries. Execution mode picks its exit code from an
# "@exit-N" tag, writes the file named by PLAYWRIGHT_JSON_OUTPUT_NAME unless
# tagged "@no-report", and sleeps briefly when tagged "@slow".
FAKE_RUNNER_SOURCE = textwrap.dedent(
    '''
    import json
    import os
    import sys
    import time

    args = sys.argv[1:]
    grep = args[args.index("--grep") + 1] if "--grep" in args else ""
    tags = [t.lstrip("@") for t in grep.split("|") if t]

    if "--list" in args:
        print("Listing tests:")
        print("  [chromium] > login.spec.ts:3:5 > logs in @smoke")
        print("  [chromium] > cart.spec.ts:10:5 > adds item")
        print("Total: 2 tests in 2 files")
        sys.stderr.write("warning: using default config\\n")
        sys.exit(0)

    if "slow" in tags:
        time.sleep(0.3)

    exit_code = 0
    for tag in tags:
        if tag.startswith("exit-"):
            exit_code = int(tag.split("-", 1)[1])

    if "no-report" not in tags:
        with open(os.environ.get("PLAYWRIGHT_JSON_OUTPUT_NAME", "report.json"), "w", encoding="utf-8") as f:
            json.dump(
                {"args": args, "outputDir": os.environ.get("PW_OUTPUT_DIR"), "exitCode": exit_code},
                f,
            )

    sys.exit(exit_code)
    '''
)


@pytest.fixture
def project_dir(tmp_path: Path) -> Path:
    path = tmp_path / "project"
    path.mkdir()
    return path


@pytest.fixture
def reports_dir(tmp_path: Path) -> Path:
    return tmp_path / "reports"


@pytest.fixture
def fake_runner_script(tmp_path: Path) -> Path:
    script = tmp_path / "fake_runner.py"
    script.write_text(FAKE_RUNNER_SOURCE, encoding="utf-8")
    return script


@pytest.fixture
def make_config(
    project_dir: Path, reports_dir: Path, fake_runner_script: Path
) -> Callable[..., RelayConfig]:
    """Builds a RelayConfig that drives the fake runner script."""

    def _make(project: Path | None = None, command: list[str] | None = None) -> RelayConfig:
        return RelayConfig(
            project=ProjectConfig(project_dir=project or project_dir),
            runner=RunnerConfig(command=command or [sys.executable, str(fake_runner_script)]),
            reports=ReportsConfig(reports_dir=reports_dir),
        )

    return _make


@pytest.fixture
def relay_config(make_config: Callable[..., RelayConfig]) -> RelayConfig:
    return make_config()


@pytest.fixture
def upstream_repo(tmp_path: Path) -> Path:
    """A git repository with one commit, usable as a clone source."""
    repo_path = tmp_path / "upstream"
    repo_path.mkdir()

    try:
        subprocess.run(["git", "--version"], check=True, capture_output=True, text=True)
    except (subprocess.CalledProcessError, FileNotFoundError) as e:
        pytest.skip(f"Git is not available or `git --version` failed: {e}")

    subprocess.run(["git", "init"], cwd=repo_path, check=True, capture_output=True)
    subprocess.run(["git", "config", "user.name", "Test User"], cwd=repo_path, check=True)
    subprocess.run(["git", "config", "user.email", "test@example.com"], cwd=repo_path, check=True)

    (repo_path / "README.md").write_text("initial commit")
    subprocess.run(["git", "add", "README.md"], cwd=repo_path, check=True)
    subprocess.run(["git", "commit", "-m", "Initial commit"], cwd=repo_path, check=True, capture_output=True)
    return repo_path
