import io
import logging

import pytest

from benchcmp import __version__
from benchcmp.cli import main

OLD_REPORT = """\
running 3 tests
test foo::bar   ... bench:       1,234 ns/iter (+/- 56)
test foo::baz   ... bench:         500 ns/iter (+/- 5)
test alpha      ... bench:          10 ns/iter (+/- 1)

test result: ok. 0 passed; 0 failed; 0 ignored; 3 measured; 0 filtered out
"""

NEW_REPORT = """\
running 3 tests
test foo::bar   ... bench:       1,000 ns/iter (+/- 40)
test foo::baz   ... bench:         750 ns/iter (+/- 9)
test omega      ... bench:          20 ns/iter (+/- 2)

test result: ok. 0 passed; 0 failed; 0 ignored; 3 measured; 0 filtered out
"""


@pytest.fixture
def reports(tmp_path):
    old = tmp_path / "before" / "bench.txt"
    new = tmp_path / "after" / "bench.txt"
    old.parent.mkdir()
    new.parent.mkdir()
    old.write_text(OLD_REPORT, encoding="utf-8")
    new.write_text(NEW_REPORT, encoding="utf-8")
    return str(old), str(new)


def table_lines(out: str):
    return [line for line in out.splitlines() if line.strip()]


def test_two_file_comparison(reports, capsys, caplog) -> None:
    assert main([*reports, "--color", "never"]) == 0
    lines = table_lines(capsys.readouterr().out)

    assert lines[0].split() == [
        "name",
        "before/bench.txt",
        "ns/iter",
        "after/bench.txt",
        "ns/iter",
        "diff",
        "ns/iter",
        "diff",
        "%",
        "speedup",
    ]
    assert lines[1].split() == ["foo::bar", "1,234", "1,000", "-234", "-18.96%", "x", "1.23"]
    assert lines[2].split() == ["foo::baz", "500", "750", "250", "50.00%", "x", "0.67"]
    assert len(lines) == 3
    assert "\033[" not in "\n".join(lines)

    assert "benchmarks in old but not in new: alpha" in caplog.messages
    assert "benchmarks in new but not in old: omega" in caplog.messages


def test_include_missing_renders_rows_instead_of_warnings(reports, capsys, caplog) -> None:
    assert main([*reports, "--color", "never", "--include-missing"]) == 0
    lines = table_lines(capsys.readouterr().out)
    assert lines[3].split() == ["alpha", "10", "n/a", "n/a", "n/a", "n/a"]
    assert lines[4].split() == ["omega", "n/a", "20", "n/a", "n/a", "n/a"]
    assert not any("not in" in message for message in caplog.messages)


def test_variance_column(reports, capsys) -> None:
    assert main([*reports, "--color", "never", "--variance"]) == 0
    out = capsys.readouterr().out
    assert "1,234 (+/- 56)" in out
    assert "1,000 (+/- 40)" in out


@pytest.mark.parametrize(
    "flag, shown, hidden",
    [
        ("--improvements", "foo::bar", "foo::baz"),
        ("--regressions", "foo::baz", "foo::bar"),
    ],
)
def test_sign_filters(reports, capsys, flag: str, shown: str, hidden: str) -> None:
    assert main([*reports, "--color", "never", flag]) == 0
    out = capsys.readouterr().out
    assert shown in out
    assert hidden not in out


def test_threshold_filters_small_changes(reports, capsys) -> None:
    assert main([*reports, "--color", "never", "--threshold", "20"]) == 0
    out = capsys.readouterr().out
    assert "foo::baz" in out
    assert "foo::bar" not in out


def test_nothing_to_output(reports, capsys, caplog) -> None:
    assert main([*reports, "--threshold", "100"]) == 0
    assert capsys.readouterr().out == ""
    assert "nothing to output" in caplog.messages


def test_color_always_marks_rows(reports, capsys) -> None:
    assert main([*reports, "--color", "always"]) == 0
    out = capsys.readouterr().out
    assert "\033[1mname" in out
    green = next(line for line in out.splitlines() if "foo::bar" in line)
    red = next(line for line in out.splitlines() if "foo::baz" in line)
    assert green.startswith("\033[32m") and green.endswith("\033[0m")
    assert red.startswith("\033[31m")


def test_strip_patterns_align_names(tmp_path, capsys, caplog) -> None:
    old = tmp_path / "old.txt"
    new = tmp_path / "new.txt"
    old.write_text("test vec::push ... bench: 100 ns/iter (+/- 1)\n", encoding="utf-8")
    new.write_text("test smallvec::push ... bench: 90 ns/iter (+/- 1)\n", encoding="utf-8")
    argv = [str(old), str(new), "--color", "never", "--strip-old", "^[^:]*::", "--strip-new", "^[^:]*::"]
    assert main(argv) == 0
    lines = table_lines(capsys.readouterr().out)
    assert lines[1].split()[:4] == ["push", "100", "90", "-10"]
    assert not caplog.messages


def test_single_file_prefix_mode_from_stdin(monkeypatch, capsys) -> None:
    report = "\n".join(
        [
            "test dense::insert       ... bench:       2,000 ns/iter (+/- 10)",
            "test dense_boxed::insert ... bench:       2,500 ns/iter (+/- 12)",
            "test sparse::insert      ... bench:         100 ns/iter (+/- 1)",
        ]
    )
    monkeypatch.setattr("sys.stdin", io.StringIO(report))
    assert main(["dense::", "dense_boxed::", "-", "--color", "never"]) == 0
    lines = table_lines(capsys.readouterr().out)
    assert lines[0].split()[:3] == ["name", "dense::", "ns/iter"]
    assert lines[1].split() == ["insert", "2,000", "2,500", "500", "25.00%", "x", "0.80"]
    assert len(lines) == 2


def test_single_file_prefix_mode_from_path(tmp_path, capsys) -> None:
    report = tmp_path / "bench.txt"
    report.write_text(
        "test a::x ... bench: 10 ns/iter (+/- 1)\ntest b::x ... bench: 5 ns/iter (+/- 1)\n",
        encoding="utf-8",
    )
    assert main(["a::", "b::", str(report), "--color", "never"]) == 0
    lines = table_lines(capsys.readouterr().out)
    assert lines[1].split() == ["x", "10", "5", "-5", "-50.00%", "x", "2.00"]


def test_failed_benchmark_is_reported_separately(tmp_path, capsys, caplog) -> None:
    old = tmp_path / "old.txt"
    new = tmp_path / "new.txt"
    old.write_text(
        "test parse::json ... bench: 100 ns/iter (+/- 1)\n"
        "test parse::xml ... FAILED\n"
        "test parse::csv ... bench: 50 ns/iter (+/- 1)\n",
        encoding="utf-8",
    )
    new.write_text(
        "test parse::json ... FAILED\n"
        "test parse::xml ... bench: 80 ns/iter (+/- 1)\n"
        "test parse::csv ... bench: 40 ns/iter (+/- 1)\n"
        "\n"
        "failures:\n"
        "\n"
        "---- parse::json stdout ----\n"
        "thread 'main' panicked at 'unexpected token', src/json.rs:12:5\n",
        encoding="utf-8",
    )
    assert main([str(old), str(new), "--color", "never"]) == 0
    out = capsys.readouterr().out
    assert "parse::csv" in out
    assert "parse::json" not in out
    assert "parse::xml" not in out
    assert "benchmarks failing in new: parse::json (unexpected token)" in caplog.messages
    assert "benchmarks recovered in new: parse::xml" in caplog.messages


def test_missing_file_is_fatal(tmp_path, capsys, caplog) -> None:
    existing = tmp_path / "old.txt"
    existing.write_text(OLD_REPORT, encoding="utf-8")
    missing = tmp_path / "missing.txt"
    assert main([str(existing), str(missing)]) == 1
    assert capsys.readouterr().out == ""
    errors = [record for record in caplog.records if record.levelno == logging.ERROR]
    assert len(errors) == 1
    assert str(missing) in errors[0].getMessage()


def test_invalid_pattern_fails_before_reading_input(tmp_path, capsys, caplog) -> None:
    missing = tmp_path / "missing.txt"
    assert main([str(missing), str(missing), "--strip-old", "(oops"]) == 1
    assert capsys.readouterr().out == ""
    messages = [record.getMessage() for record in caplog.records if record.levelno == logging.ERROR]
    assert len(messages) == 1
    assert "invalid name pattern" in messages[0]


def test_conflicting_filters_are_usage_errors(reports) -> None:
    with pytest.raises(SystemExit) as excinfo:
        main([*reports, "--improvements", "--regressions"])
    assert excinfo.value.code == 2


def test_negative_threshold_is_usage_error(reports) -> None:
    with pytest.raises(SystemExit) as excinfo:
        main([*reports, "--threshold", "-1"])
    assert excinfo.value.code == 2


def test_version(capsys) -> None:
    with pytest.raises(SystemExit) as excinfo:
        main(["--version"])
    assert excinfo.value.code == 0
    assert capsys.readouterr().out.strip() == __version__


def test_invalid_utf8_on_stdin_is_replaced(monkeypatch, capsys) -> None:
    raw = (
        b"test a::x ... bench: 10 ns/iter (+/- 1)\xff\n"
        b"test b::x ... bench: 5 ns/iter (+/- 1)\n"
    )
    monkeypatch.setattr("sys.stdin", io.TextIOWrapper(io.BytesIO(raw), encoding="utf-8"))
    assert main(["a::", "b::", "-", "--color", "never"]) == 0
    lines = table_lines(capsys.readouterr().out)
    assert lines[1].split() == ["x", "10", "5", "-5", "-50.00%", "x", "2.00"]


def test_stdin_for_both_sides_is_usage_error(capsys) -> None:
    with pytest.raises(SystemExit) as excinfo:
        main(["-", "-"])
    assert excinfo.value.code == 2
    assert "standard input" in capsys.readouterr().err
