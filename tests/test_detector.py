import pytest
from redundant_lines.analysis import BlankRunDetector, DetectorConfig, RULE_ID, Severity
from redundant_lines.errors import ThresholdMisconfiguration
from redundant_lines.syntax import CFamilyLexer, TextSpan, Trivia, TriviaKind


def analyze(source, min_blank_lines=2, path=None):
    tree = CFamilyLexer().lex(source, path)
    detector = BlankRunDetector(DetectorConfig(min_blank_lines=min_blank_lines))
    return detector.analyze(tree)


def test_two_blank_lines_reported():
    diagnostics = analyze("A;\n\n\nB;")
    assert len(diagnostics) == 1

    diagnostic = diagnostics[0]
    assert diagnostic.rule_id == RULE_ID == "empty-lines-redundant"
    assert diagnostic.severity == Severity.ERROR
    assert diagnostic.span == TextSpan(3, 5)
    assert diagnostic.anchor == 5
    assert diagnostic.blank_lines == 2


def test_single_blank_line_not_reported():
    assert analyze("A;\n\nB;") == []


@pytest.mark.parametrize("threshold", [2, 3, 4])
def test_threshold_boundary(threshold):
    # Exactly threshold - 1 blank lines never trigger
    below = "A;\n" + "\n" * (threshold - 1) + "B;"
    assert analyze(below, min_blank_lines=threshold) == []

    # Exactly threshold blank lines always trigger
    at = "A;\n" + "\n" * threshold + "B;"
    diagnostics = analyze(at, min_blank_lines=threshold)
    assert len(diagnostics) == 1
    assert diagnostics[0].blank_lines == threshold


def test_comment_separates_runs():
    # One blank line on each side of the comment: nothing to report
    assert analyze("A;\n\n// c\n\nB;") == []

    # Two above, one below: only the first side is reported
    diagnostics = analyze("A;\n\n\n// c\n\nB;")
    assert [d.span for d in diagnostics] == [TextSpan(3, 5)]


def test_multiple_runs_in_one_trivia_list():
    diagnostics = analyze("A;\n\n\n// c\n\n\nB;")
    assert [d.span for d in diagnostics] == [TextSpan(3, 5), TextSpan(10, 12)]
    assert all(d.anchor == 12 for d in diagnostics)


def test_run_starting_mid_line_skips_comment_line():
    # The line break ending the comment line is not a blank line
    diagnostics = analyze("/* c */\n\n\nB;")
    assert len(diagnostics) == 1
    assert diagnostics[0].span == TextSpan(8, 10)
    assert diagnostics[0].blank_lines == 2

    assert analyze("/* c */\n\nB;") == []


def test_run_starting_mid_line_with_crlf():
    diagnostics = analyze("/* c */\r\n\r\n\r\nB;")
    assert len(diagnostics) == 1
    assert diagnostics[0].span == TextSpan(9, 13)


def test_run_starting_after_trailing_whitespace():
    diagnostics = analyze("/* c */  \n\n\nX")
    assert [d.span for d in diagnostics] == [TextSpan(10, 12)]


def test_whitespace_only_lines_are_blank():
    diagnostics = analyze("{\n    \n    \n}")
    assert len(diagnostics) == 1
    assert diagnostics[0].span == TextSpan(2, 12)


def test_indentation_before_token_not_in_span():
    source = "{\n    x;\n\n\n    }"
    diagnostics = analyze(source)
    assert len(diagnostics) == 1
    assert diagnostics[0].span == TextSpan(9, 11)
    assert diagnostics[0].anchor == 15


def test_run_at_end_of_file():
    diagnostics = analyze("A;\n\n\n")
    assert len(diagnostics) == 1
    assert diagnostics[0].anchor == 5


def test_two_runs_in_source_order():
    diagnostics = analyze("A;\n\n\nB;\n\n\nC;")
    assert len(diagnostics) == 2
    assert diagnostics[0].span.start < diagnostics[1].span.start
    assert diagnostics[0].anchor == 5
    assert diagnostics[1].anchor == 10


def test_blank_lines_inside_string_ignored():
    assert analyze('s = @"a\n\n\n\nb";') == []


def test_generated_code_skipped():
    source = "// <auto-generated/>\nA;\n\n\nB;"
    assert analyze(source) == []
    assert analyze("A;\n\n\nB;", path="Model.g.cs") == []


def test_find_candidates_only_line_breaks_extend():
    detector = BlankRunDetector()
    trivia = [
        Trivia(TriviaKind.COMMENT, "/**/", TextSpan(0, 4)),
        Trivia(TriviaKind.END_OF_LINE, "\n", TextSpan(4, 5)),
        Trivia(TriviaKind.WHITESPACE, "  ", TextSpan(5, 7)),
        Trivia(TriviaKind.OTHER, "#if", TextSpan(7, 10)),
        Trivia(TriviaKind.WHITESPACE, " ", TextSpan(10, 11)),
    ]
    assert detector.find_candidates(trivia) == [TextSpan(4, 5), TextSpan(10, 11)]


def test_empty_or_all_comment_trivia_yields_nothing():
    detector = BlankRunDetector()
    assert detector.find_candidates([]) == []
    comments = [Trivia(TriviaKind.COMMENT, "// a", TextSpan(0, 4))]
    assert detector.find_candidates(comments) == []


def test_threshold_below_two_rejected():
    with pytest.raises(ThresholdMisconfiguration):
        DetectorConfig(min_blank_lines=1)

    # Also usable as a plain ValueError
    with pytest.raises(ValueError):
        DetectorConfig(min_blank_lines=0)
