"""
Tests for the benchls command line.
"""

import io

import pytest

from benchls.cli import EXIT_IO_ERROR, EXIT_OK, EXIT_USAGE, build_parser, main


@pytest.fixture
def bench_file(tmp_path, sort_output):
    path = tmp_path / "sort.txt"
    path.write_text(sort_output)
    return path


class TestParser:

    def test_defaults(self):
        args = build_parser().parse_args([])
        assert args.vars == r"/?(?P<N>\d+)-\d+$"
        assert args.x_transform == "N, 1.0"
        assert args.y_transform == "Y"
        assert args.response == "NsPerOp"
        assert args.html is False
        assert args.input == "-"

    def test_short_aliases(self):
        args = build_parser().parse_args(["--xt", "N*N, N", "--yt", "Y/N"])
        assert args.x_transform == "N*N, N"
        assert args.y_transform == "Y/N"


class TestMain:

    def test_text_report(self, bench_file, capsys):
        assert main([str(bench_file)]) == EXIT_OK
        out = capsys.readouterr().out.splitlines()
        assert out[0].split() == ["group", "\\", "Y", "~", "N", "1.0", "R^2"]
        assert out[1].startswith("BenchmarkSort ")
        assert "e+02±" in out[1]

    def test_html_report(self, bench_file, capsys):
        assert main(["--html", str(bench_file)]) == EXIT_OK
        out = capsys.readouterr().out
        assert "<table class='benchls'>" in out
        assert "<td>BenchmarkSort</td>" in out

    def test_stdin(self, sort_output, capsys, monkeypatch):
        monkeypatch.setattr("sys.stdin", io.StringIO(sort_output))
        assert main(["--xt", "N"]) == EXIT_OK
        assert "BenchmarkSort" in capsys.readouterr().out

    def test_compile_error(self, bench_file, capsys):
        assert main(["--xt", "math.Frobnicate(N)", str(bench_file)]) == EXIT_USAGE
        assert "unknown math function math.Frobnicate" in capsys.readouterr().err

    def test_reserved_name(self, bench_file, capsys):
        assert main(["--vars", r"(?P<Y>\d+)-\d+$", str(bench_file)]) == EXIT_USAGE
        assert "reserved" in capsys.readouterr().err

    def test_bad_response(self, bench_file, capsys):
        assert main(["--response", "Latency", str(bench_file)]) == EXIT_USAGE
        assert "invalid response" in capsys.readouterr().err

    def test_bad_regex(self, bench_file, capsys):
        assert main(["--vars", "(", str(bench_file)]) == EXIT_USAGE
        assert "invalid vars pattern" in capsys.readouterr().err

    def test_missing_file(self, tmp_path, capsys):
        assert main([str(tmp_path / "missing.txt")]) == EXIT_IO_ERROR
        assert capsys.readouterr().err.startswith("benchls:")

    def test_undecodable_bytes_in_log_lines(self, tmp_path, sort_output, capsys):
        path = tmp_path / "mixed.txt"
        path.write_bytes(b"\xff\xfe log line\n" + sort_output.encode())
        assert main([str(path)]) == EXIT_OK
        assert capsys.readouterr().out.splitlines()[1].startswith("BenchmarkSort ")

    def test_undecodable_stdin(self, capsys, monkeypatch):
        stdin = io.TextIOWrapper(io.BytesIO(b"\xff\xfe\n"), encoding="utf-8")
        monkeypatch.setattr("sys.stdin", stdin)
        assert main([]) == EXIT_IO_ERROR
        assert "codec" in capsys.readouterr().err

    def test_nothing_matches(self, bench_file, capsys):
        assert main(["--vars", r"/size=(?P<N>\d+)", str(bench_file)]) == EXIT_IO_ERROR
        assert "no benchmarks match" in capsys.readouterr().err

    def test_group_without_model(self, tmp_path, capsys):
        path = tmp_path / "one.txt"
        path.write_text("BenchmarkA10-4  100  5 ns/op\n")
        with pytest.warns(UserWarning, match="no model"):
            assert main([str(path)]) == EXIT_OK
        row = capsys.readouterr().out.splitlines()[1]
        assert row.split() == ["BenchmarkA", "~", "~", "~"]

    def test_unknown_flag_exits(self):
        with pytest.raises(SystemExit) as exc_info:
            main(["--bogus"])
        assert exc_info.value.code == EXIT_USAGE
