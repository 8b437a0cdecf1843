"""
Tests of the single-case driver, with the compiler and engine faked out.
"""

import logging

import pytest

from pinchoff.config import DriverSettings
from pinchoff.driver import (
    CaseDriver,
    CaseRequest,
    PreflightError,
    source_file_name,
    validate_case_no,
    validate_threads,
)


@pytest.mark.parametrize("raw, expected", [("1", 1), ("4", 4), (16, 16)])
def test_validate_threads_accepts(raw, expected):
    assert validate_threads(raw) == expected


@pytest.mark.parametrize("raw", ["0", "-3", "04", "two", "", "1.5", " 2"])
def test_validate_threads_rejects(raw):
    with pytest.raises(PreflightError, match="positive integer"):
        validate_threads(raw)


@pytest.mark.parametrize("raw, message", [
    (None, "not found"),
    ("", "not found"),
    ("abc", "must be numeric"),
    ("-1000", "must be numeric"),
    ("999", ">= 1000"),
])
def test_validate_case_no_rejects(raw, message):
    with pytest.raises(PreflightError, match=message):
        validate_case_no(raw, "case.params")


def test_source_file_name():
    assert source_file_name("LiquidOutThinning") == "LiquidOutThinning.c"
    assert source_file_name("LiquidOutThinning.c") == "LiquidOutThinning.c"


def test_end_to_end(project, fake_runner, caplog):
    driver = CaseDriver(project, runner=fake_runner)
    with caplog.at_level(logging.INFO):
        status = driver.run(CaseRequest(threads=2))

    assert status == 0
    case_dir = project / "simulationCases" / "1000"
    assert (case_dir / "case.params").read_text() == (project / "default.params").read_text()
    assert (case_dir / "LiquidOutThinning.c").is_file()
    assert (case_dir / "LiquidOutThinning").is_file()
    assert (case_dir / "c1000-log").is_file()

    compile_call, run_call = fake_runner.calls
    assert compile_call["args"] == [
        "qcc", "-I../../src-local", "-O2", "-Wall", "-disable-dimensions", "-fopenmp",
        "LiquidOutThinning.c", "-o", "LiquidOutThinning", "-lm",
    ]
    assert compile_call["cwd"] == case_dir
    # staging happened before the build step
    assert {"case.params", "LiquidOutThinning.c"} <= set(compile_call["files"])

    assert run_call["args"] == [str(case_dir / "LiquidOutThinning"), "case.params"]
    assert run_call["cwd"] == case_dir
    assert run_call["env"]["OMP_NUM_THREADS"] == "2"

    assert "Simulation completed successfully." in caplog.text
    assert "Log file: simulationCases/1000/c1000-log" in caplog.text
    metadata = (case_dir / "METADATA.json").read_text()
    assert '"exit_code": 0' in metadata


def test_engine_exit_code_is_propagated(project, make_runner, caplog):
    runner = make_runner(engine_status=3, write_log=False)
    with caplog.at_level(logging.INFO):
        assert CaseDriver(project, runner=runner).run(CaseRequest()) == 3
    assert "Simulation failed with exit code: 3" in caplog.text
    assert "Log file:" not in caplog.text


def test_compile_failure_stops_before_running(project, make_runner):
    runner = make_runner(compile_status=2)
    assert CaseDriver(project, runner=runner).run(CaseRequest()) == 2
    assert len(runner.calls) == 1
    assert not (project / "simulationCases" / "1000" / "LiquidOutThinning").exists()


def test_case_no_below_floor_creates_nothing(project, fake_runner):
    (project / "default.params").write_text("CaseNo=999\n")
    driver = CaseDriver(project, runner=fake_runner)
    with pytest.raises(PreflightError, match=">= 1000"):
        driver.run(CaseRequest())
    assert not (project / "simulationCases" / "999").exists()
    assert fake_runner.calls == []


def test_missing_compiler(project, make_runner):
    driver = CaseDriver(project, runner=make_runner(tools=()))
    with pytest.raises(PreflightError, match="qcc not found in PATH"):
        driver.run(CaseRequest())
    assert sorted(p.name for p in (project / "simulationCases").iterdir()) == ["LiquidOutThinning.c"]


def test_missing_params_file(project, fake_runner):
    with pytest.raises(PreflightError, match="Parameter file not found"):
        CaseDriver(project, runner=fake_runner).prepare(CaseRequest(params_file="absent.params"))


def test_missing_source_file(project, fake_runner):
    with pytest.raises(PreflightError, match="Source file not found"):
        CaseDriver(project, runner=fake_runner).prepare(CaseRequest(exec_name="Absent"))


def test_invalid_threads_checked_first(project, make_runner):
    driver = CaseDriver(project, runner=make_runner(tools=()))
    with pytest.raises(PreflightError, match="positive integer"):
        driver.prepare(CaseRequest(threads="0"))


def test_prepare_resolves_paths(project, fake_runner, monkeypatch):
    sub = project / "sweep"
    sub.mkdir()
    (sub / "c2000.params").write_text("# sweep case\nCaseNo=2000\nCaseNo=3000\n")
    (project / "simulationCases" / "Other.c").write_text("")
    monkeypatch.chdir(sub)

    case = CaseDriver(project, runner=fake_runner).prepare(
        CaseRequest(params_file="sweep/c2000.params", exec_name="Other", threads="8")
    )
    assert case.case_no == 2000
    assert case.params_file == sub / "c2000.params"
    assert case.params_file.is_absolute()
    assert case.source_file == project / "simulationCases" / "Other.c"
    assert case.executable_name == "Other"
    assert case.threads == 8
    assert case.case_dir == project / "simulationCases" / "2000"
    assert case.log_name == "c2000-log"


def test_checkpoint_notice(project, fake_runner, caplog):
    case_dir = project / "simulationCases" / "1000"
    case_dir.mkdir()
    (case_dir / "restart").write_text("state")
    with caplog.at_level(logging.INFO):
        assert CaseDriver(project, runner=fake_runner).run(CaseRequest()) == 0
    assert "resume from checkpoint" in caplog.text


def test_rerun_is_safe(project, fake_runner):
    driver = CaseDriver(project, runner=fake_runner)
    assert driver.run(CaseRequest()) == 0
    assert driver.run(CaseRequest()) == 0
    assert len(fake_runner.calls) == 4


def test_settings_shape_commands(project, fake_runner):
    settings = DriverSettings(
        compiler="gcc", include_dirs=[], cflags=["-O3"], libs=[],
        thread_env="NUM_THREADS", search_path=["/opt/tools/bin"], env={"EXTRA": "1"},
    )
    fake_runner.tools = {"gcc"}
    assert CaseDriver(project, settings, fake_runner).run(CaseRequest()) == 0

    compile_call, run_call = fake_runner.calls
    assert compile_call["args"] == ["gcc", "-O3", "-fopenmp", "LiquidOutThinning.c", "-o", "LiquidOutThinning"]
    assert compile_call["env"]["PATH"].startswith("/opt/tools/bin")
    assert run_call["env"]["NUM_THREADS"] == "4"
    assert run_call["env"]["EXTRA"] == "1"


def test_empty_exec_rejected(project, fake_runner):
    with pytest.raises(PreflightError, match="--exec requires a file name"):
        CaseDriver(project, runner=fake_runner).prepare(CaseRequest(exec_name=""))


def test_invalid_threads_from_settings_names_the_setting(project, fake_runner):
    driver = CaseDriver(project, DriverSettings(threads=0), fake_runner)
    with pytest.raises(PreflightError, match="threads in pinchoff.toml must be a positive integer"):
        driver.prepare(CaseRequest())


def test_driver_log_records_case_inputs(project, fake_runner, caplog):
    with caplog.at_level(logging.INFO):
        assert CaseDriver(project, runner=fake_runner).run(CaseRequest()) == 0
    driver_log = (project / "simulationCases" / "1000" / "driver.log").read_text()
    assert "CaseNo: 1000" in driver_log
    assert "Run mode: OpenMP (threads=4)" in driver_log
    assert "Simulation completed successfully." in driver_log
