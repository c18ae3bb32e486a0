import pytest
from redundant_lines.analysis import DetectorConfig
from redundant_lines.errors import ThresholdMisconfiguration, UnknownLexerError
from redundant_lines.pipeline import (
    LintPipeline,
    PipelineConfig,
    check_source,
    fix_source,
    format_diagnostic,
)
from redundant_lines.syntax import LineIndex


def test_pipeline_initialization():
    # Test default config
    pipe = LintPipeline()
    assert pipe.config.detector_config.min_blank_lines == 2
    assert pipe.lexer.name == "c-family"

    # Test object config
    config = PipelineConfig(detector_config=DetectorConfig(min_blank_lines=3))
    pipe = LintPipeline(config)
    assert pipe.detector.threshold == 3
    assert pipe.rewriter.kept_line_breaks == 2


def test_unknown_lexer():
    pipe = LintPipeline(PipelineConfig(lexer="cobol"))
    with pytest.raises(UnknownLexerError):
        pipe.check_text("A;")


def test_quick_functions():
    assert len(check_source("A;\n\n\nB;")) == 1
    assert check_source("A;\n\n\nB;", min_blank_lines=3) == []
    assert fix_source("A;\n\n\nB;") == "A;\n\nB;"
    assert fix_source("A;\n\nB;") == "A;\n\nB;"

    with pytest.raises(ThresholdMisconfiguration):
        fix_source("A;", min_blank_lines=1)


def test_two_runs_fixed_independently():
    source = "int a;\n\n\nint b;\n\n\nint c;\n"
    pipe = LintPipeline()
    assert len(pipe.check_text(source)) == 2
    assert pipe.fix_text(source).text == "int a;\n\nint b;\n\nint c;\n"


def test_generated_policy():
    source = "// <auto-generated/>\nA;\n\n\nB;"
    assert LintPipeline().check_text(source) == []

    pipe = LintPipeline(PipelineConfig(skip_generated=False))
    assert len(pipe.check_text(source)) == 1


def test_format_diagnostic():
    pipe = LintPipeline()
    source = "A;\n\n\nB;"
    diagnostics = pipe.check_text(source, "a.cs")
    line = format_diagnostic(diagnostics[0], LineIndex(source))
    assert line == (
        "a.cs:2:1: error empty-lines-redundant: "
        "Remove multiple sequential empty lines (2 found, at most 1 allowed)"
    )


def test_check_and_fix_file(tmp_path):
    source_file = tmp_path / "Program.cs"
    source_file.write_bytes(b"class A\r\n{\r\n}\r\n\r\n\r\nclass B\r\n{\r\n}\r\n")

    pipe = LintPipeline()
    report = pipe.check_file(source_file)
    assert report.error is None
    assert len(report.diagnostics) == 1
    assert not report.ok
    assert report.format_lines()[0].startswith(f"{source_file}:4:1: error")

    report = pipe.fix_file(source_file)
    assert report.fixed == 1
    # Line endings are written back untouched
    assert source_file.read_bytes() == b"class A\r\n{\r\n}\r\n\r\nclass B\r\n{\r\n}\r\n"

    assert pipe.check_file(source_file).ok


def test_fix_file_without_writing(tmp_path):
    source_file = tmp_path / "a.js"
    source_file.write_text("a();\n\n\nb();\n", encoding="utf-8")

    report = LintPipeline().fix_file(source_file, write=False)
    assert report.fixed == 1
    assert report.fixed_text == "a();\n\nb();\n"
    assert source_file.read_text(encoding="utf-8") == "a();\n\n\nb();\n"


def test_missing_file_reports_error(tmp_path):
    report = LintPipeline().check_file(tmp_path / "missing.cs")
    assert report.error is not None
    assert report.diagnostics == []


def test_collect_files(tmp_path):
    (tmp_path / "src").mkdir()
    (tmp_path / "src" / "a.cs").write_text("A;\n")
    (tmp_path / "src" / "b.java").write_text("B;\n")
    (tmp_path / "src" / "notes.txt").write_text("text\n")
    explicit = tmp_path / "notes.txt"
    explicit.write_text("text\n")

    pipe = LintPipeline()
    files = pipe.collect_files([tmp_path / "src", explicit])
    assert [f.name for f in files] == ["notes.txt", "a.cs", "b.java"]

    pipe = LintPipeline(PipelineConfig(file_patterns=["*.cs"]))
    assert [f.name for f in pipe.collect_files([tmp_path])] == ["a.cs"]


@pytest.mark.parametrize("jobs", [1, 4])
def test_check_and_fix_paths(tmp_path, jobs):
    for i in range(5):
        (tmp_path / f"file{i}.cs").write_text(f"int a{i};\n\n\n\nint b{i};\n")
    (tmp_path / "clean.cs").write_text("int a;\n\nint b;\n")

    pipe = LintPipeline(PipelineConfig(jobs=jobs))
    reports = pipe.check_paths([tmp_path])
    assert [r.path.name for r in reports] == sorted(r.path.name for r in reports)
    assert sum(len(r.diagnostics) for r in reports) == 5

    reports = pipe.fix_paths([tmp_path])
    assert sum(r.fixed for r in reports) == 5
    assert (tmp_path / "file3.cs").read_text() == "int a3;\n\nint b3;\n"
    assert all(r.ok for r in pipe.check_paths([tmp_path]))
