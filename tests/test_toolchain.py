"""Tests for toolchain adapters and the language registry.

Compiled toolchains run against FakeRunner so no compiler is needed.
The interpreted adapter also runs for real with the current interpreter.
"""

from __future__ import annotations

import sys
from pathlib import Path

import pytest

from aipa.exceptions import ToolchainNotFoundError, UnrecoverableIOError
from aipa.models.config import AipaConfig
from aipa.models.outcome import FailureKind
from aipa.toolchain import (
    UNSUPPORTED_LANGUAGE_DETAIL,
    BytecodeAdapter,
    InterpretedAdapter,
    NativeCompiledAdapter,
    ProcessResult,
    SubprocessRunner,
    UnsupportedAdapter,
    build_registry,
)
from tests.conftest import FakeRunner, compiler_writes_output


@pytest.fixture
def rust_source(tmp_path: Path) -> Path:
    source = tmp_path / "project_x.rs"
    source.write_text('fn main() { println!("hi"); }')
    return source


class TestNativeCompiledAdapter:
    def test_compile_failure_returns_stderr_without_running(self, rust_source: Path):
        runner = FakeRunner(lambda argv, cwd: ProcessResult(returncode=1, stderr="error[E0425]: oops"))
        adapter = NativeCompiledAdapter("rustc", runner=runner)

        outcome = adapter.build_and_run(rust_source)

        assert not outcome.succeeded
        assert outcome.failure_kind is FailureKind.BUILD
        assert outcome.error_detail == "error[E0425]: oops"
        assert len(runner.calls) == 1

    def test_compile_command_names_output(self, rust_source: Path):
        runner = FakeRunner(lambda argv, cwd: ProcessResult(returncode=1))
        NativeCompiledAdapter("rustc", runner=runner).build_and_run(rust_source)
        assert runner.calls[0] == ["rustc", str(rust_source), "-o", str(rust_source.with_suffix(""))]

    def test_missing_artifact_mentions_expected_path(self, rust_source: Path):
        runner = FakeRunner(lambda argv, cwd: ProcessResult(returncode=0))
        outcome = NativeCompiledAdapter("rustc", runner=runner).build_and_run(rust_source)

        assert not outcome.succeeded
        assert outcome.failure_kind is FailureKind.ARTIFACT_MISSING
        assert str(rust_source.with_suffix("")) in outcome.error_detail
        assert len(runner.calls) == 1

    def test_success_runs_absolute_binary(self, rust_source: Path):
        runner = FakeRunner(compiler_writes_output(run_stdout="AIPA: x completed\n"))
        outcome = NativeCompiledAdapter("rustc", runner=runner).build_and_run(rust_source)

        assert outcome.succeeded
        assert outcome.stdout_text == "AIPA: x completed\n"
        assert outcome.error_detail is None
        run_argv = runner.calls[1]
        assert run_argv == [str(rust_source.with_suffix("").resolve())]
        assert Path(run_argv[0]).is_absolute()

    def test_run_failure_returns_stderr(self, rust_source: Path):
        runner = FakeRunner(compiler_writes_output(run_code=101, run_stderr="panicked"))
        outcome = NativeCompiledAdapter("rustc", runner=runner).build_and_run(rust_source)

        assert outcome.failure_kind is FailureKind.RUN
        assert outcome.error_detail == "panicked"
        assert outcome.exit_code == 101

    def test_stale_binary_removed_before_compile(self, rust_source: Path):
        stale = rust_source.with_suffix("")
        stale.write_text("old binary")
        runner = FakeRunner(lambda argv, cwd: ProcessResult(returncode=0))

        outcome = NativeCompiledAdapter("rustc", runner=runner).build_and_run(rust_source)

        # The old binary must not be mistaken for fresh output
        assert outcome.failure_kind is FailureKind.ARTIFACT_MISSING
        assert not stale.exists()

    def test_unremovable_stale_output_is_fatal(self, rust_source: Path):
        rust_source.with_suffix("").mkdir()
        runner = FakeRunner()
        with pytest.raises(UnrecoverableIOError):
            NativeCompiledAdapter("rustc", runner=runner).build_and_run(rust_source)
        assert runner.calls == []

    def test_compile_timeout_is_recoverable(self, rust_source: Path):
        runner = FakeRunner(lambda argv, cwd: ProcessResult(returncode=-1, timed_out=True))
        outcome = NativeCompiledAdapter("rustc", runner=runner, timeout=5).build_and_run(rust_source)
        assert outcome.failure_kind is FailureKind.TIMEOUT
        assert "timed out after 5s" in outcome.error_detail

    def test_extra_args(self, tmp_path: Path):
        source = tmp_path / "p.cpp"
        runner = FakeRunner(lambda argv, cwd: ProcessResult(returncode=1))
        NativeCompiledAdapter("g++", extra_args=["-O2"], runner=runner).build_and_run(source)
        assert runner.calls[0][:3] == ["g++", "-O2", str(source)]

    def test_derived_artifacts(self, rust_source: Path):
        adapter = NativeCompiledAdapter("rustc", runner=FakeRunner())
        assert adapter.derived_artifacts(rust_source) == [rust_source.with_suffix("")]


class TestBytecodeAdapter:
    def test_compile_and_run_commands(self, tmp_path: Path):
        source = tmp_path / "project_x.java"

        def handler(argv, cwd):
            if argv[0] == "javac":
                (Path(argv[2]) / "Main.class").write_text("")
                return ProcessResult(returncode=0)
            return ProcessResult(returncode=0, stdout="AIPA: x completed\n")

        runner = FakeRunner(handler)
        outcome = BytecodeAdapter("javac", "java", runner=runner).build_and_run(source)

        assert outcome.succeeded
        assert runner.calls[0] == ["javac", "-d", str(tmp_path), str(source)]
        assert runner.calls[1] == ["java", "-cp", str(tmp_path.resolve()), "Main"]

    def test_missing_class_file(self, tmp_path: Path):
        runner = FakeRunner(lambda argv, cwd: ProcessResult(returncode=0))
        outcome = BytecodeAdapter("javac", "java", runner=runner).build_and_run(tmp_path / "p.java")
        assert outcome.failure_kind is FailureKind.ARTIFACT_MISSING
        assert "Main.class" in outcome.error_detail

    def test_derived_artifacts_include_inner_classes(self, tmp_path: Path):
        (tmp_path / "Main$Inner.class").write_text("")
        adapter = BytecodeAdapter("javac", "java", runner=FakeRunner())
        assert adapter.derived_artifacts(tmp_path / "p.java") == [
            tmp_path / "Main.class",
            tmp_path / "Main$Inner.class",
        ]

    def test_stale_inner_classes_removed_before_compile(self, tmp_path: Path):
        stale_inner = tmp_path / "Main$Old.class"
        stale_inner.write_text("old")
        (tmp_path / "Main.class").write_text("old")
        seen_before_compile = []

        def handler(argv, cwd):
            if argv[0] == "javac":
                seen_before_compile.extend(sorted(p.name for p in tmp_path.glob("*.class")))
                return ProcessResult(returncode=1, stderr="error: ';' expected")
            return ProcessResult(returncode=0)

        outcome = BytecodeAdapter("javac", "java", runner=FakeRunner(handler)).build_and_run(
            tmp_path / "p.java"
        )

        assert outcome.failure_kind is FailureKind.BUILD
        assert seen_before_compile == []
        assert not stale_inner.exists()


class TestInterpretedAdapter:
    def test_single_step(self, tmp_path: Path):
        source = tmp_path / "p.py"
        runner = FakeRunner(lambda argv, cwd: ProcessResult(returncode=0, stdout="hi\n"))
        outcome = InterpretedAdapter("python3", runner=runner).build_and_run(source)
        assert outcome.succeeded
        assert runner.calls == [["python3", str(source)]]

    def test_real_interpreter_success(self, tmp_path: Path):
        source = tmp_path / "p.py"
        source.write_text("print('AIPA: print hello completed')")
        outcome = InterpretedAdapter(sys.executable).build_and_run(source)
        assert outcome.succeeded
        assert "AIPA: print hello completed" in outcome.stdout_text

    def test_real_interpreter_failure(self, tmp_path: Path):
        source = tmp_path / "p.py"
        source.write_text("raise SystemExit('boom')")
        outcome = InterpretedAdapter(sys.executable).build_and_run(source)
        assert outcome.failure_kind is FailureKind.RUN
        assert "boom" in outcome.error_detail
        assert outcome.exit_code == 1

    def test_real_timeout(self, tmp_path: Path):
        source = tmp_path / "p.py"
        source.write_text("import time\ntime.sleep(30)")
        outcome = InterpretedAdapter(sys.executable, timeout=0.5).build_and_run(source)
        assert outcome.failure_kind is FailureKind.TIMEOUT

    def test_missing_interpreter_is_fatal(self, tmp_path: Path):
        source = tmp_path / "p.py"
        source.write_text("")
        with pytest.raises(ToolchainNotFoundError) as exc_info:
            InterpretedAdapter("aipa-no-such-interpreter").build_and_run(source)
        assert exc_info.value.executable == "aipa-no-such-interpreter"


class TestUnsupportedAdapter:
    def test_fails_without_side_effects(self, tmp_path: Path):
        source = tmp_path / "missing" / "p.txt"
        outcome = UnsupportedAdapter().build_and_run(source)
        assert outcome.failure_kind is FailureKind.UNSUPPORTED
        assert outcome.error_detail == UNSUPPORTED_LANGUAGE_DETAIL
        assert not source.parent.exists()


class TestRegistry:
    def test_default_languages(self):
        registry = build_registry()
        assert registry.names() == ["c", "cpp", "java", "javascript", "python", "rust"]

    def test_adapter_shapes(self):
        registry = build_registry()
        assert isinstance(registry.adapter_for("rust"), NativeCompiledAdapter)
        assert isinstance(registry.adapter_for("java"), BytecodeAdapter)
        assert isinstance(registry.adapter_for("python"), InterpretedAdapter)
        assert isinstance(registry.adapter_for("cobol"), UnsupportedAdapter)
        assert not registry.is_supported("cobol")

    def test_lookup_is_case_insensitive(self):
        assert build_registry().extension_for("RUST") == "rs"

    def test_executable_overrides(self):
        config = AipaConfig(executables={"python": "pypy3", "java": "ecj:jre-java", "cpp": "clang++"})
        registry = build_registry(config)
        assert registry.adapter_for("python").interpreter == "pypy3"
        assert registry.adapter_for("cpp").compiler == "clang++"
        java = registry.adapter_for("java")
        assert (java.compiler, java.runtime) == ("ecj", "jre-java")

    def test_java_override_keeps_default_runtime(self):
        java = build_registry(AipaConfig(executables={"java": "ecj"})).adapter_for("java")
        assert (java.compiler, java.runtime) == ("ecj", "java")


class TestSubprocessRunner:
    def test_captures_streams(self):
        result = SubprocessRunner().run(
            [sys.executable, "-c", "import sys; print('out'); print('err', file=sys.stderr); sys.exit(3)"]
        )
        assert result.returncode == 3
        assert result.stdout.strip() == "out"
        assert result.stderr.strip() == "err"
        assert not result.ok
