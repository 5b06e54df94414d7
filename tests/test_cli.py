from __future__ import annotations

import pytest

from st_namecheck.cli import EXIT_FAILURE, EXIT_INPUT_ERRORS, EXIT_OK, build_parser, main


@pytest.fixture
def dictionary(tmp_path):
    path = tmp_path / "streets.txt"
    path.write_text("Main Street\nOak Avenue\n", encoding="utf-8")
    return path


@pytest.fixture
def names(tmp_path):
    path = tmp_path / "names.txt"
    path.write_text("Main Street\nMan Street\nOak Avenue\nPine Road\nMain Street\n", encoding="utf-8")
    return path


def test_parser_defaults():
    args = build_parser().parse_args(["extract.osm"])

    assert args.inputs == ["extract.osm"]
    assert not args.per_street_stats
    assert not args.dump
    assert args.jobs == 1


def test_check_names(dictionary, names, capsys):
    code = main(["-l", "en_US", "-f", str(dictionary), "-s", str(names)])

    assert code == EXIT_OK
    out = capsys.readouterr().out
    assert "Total names processed: 5" in out
    assert "Per-street statistics (2 of 2 streets matched):" in out


def test_dump(dictionary, names, tmp_path):
    outdir = tmp_path / "out"
    code = main(["-l", "en_US", "-f", str(dictionary), "-d", "-c", "-o", str(outdir), str(names)])

    assert code == EXIT_OK
    assert (outdir / "dump.unmatched.txt").read_text(encoding="utf-8") == "1\tPine Road\n"
    assert "\t2\tMain Street\n" in (outdir / "dump.streets.txt").read_text(encoding="utf-8")


def test_dump_csv(dictionary, names, tmp_path):
    code = main(["-l", "en_US", "-f", str(dictionary), "-d", "--format", "csv", "-o", str(tmp_path), str(names)])

    assert code == EXIT_OK
    assert (tmp_path / "dump.csv").exists()


def test_missing_dictionary(tmp_path, names, capsys):
    code = main(["-l", "en_US", "-f", str(tmp_path / "missing.txt"), str(names)])

    assert code == EXIT_FAILURE
    assert "Failed" in capsys.readouterr().err


def test_malformed_dictionary(tmp_path, names, capsys):
    path = tmp_path / "broken.txt"
    path.write_text("Main Street\n| Oak Avenue\n", encoding="utf-8")

    code = main(["-l", "en_US", "-f", str(path), str(names)])

    assert code == EXIT_FAILURE
    assert f"{path}:2:" in capsys.readouterr().err


def test_failed_input_is_reported(dictionary, names, tmp_path, capsys):
    code = main(["-l", "en_US", "-f", str(dictionary), str(tmp_path / "missing.osm"), str(names)])

    assert code == EXIT_INPUT_ERRORS
    captured = capsys.readouterr()
    assert "Total names processed: 5" in captured.out
    assert "Failed" in captured.err


def test_unknown_locale(dictionary, names):
    assert main(["-l", "xx_XX", "-f", str(dictionary), str(names)]) == EXIT_FAILURE


@pytest.mark.parametrize("argv", [
    ["-p", "-1", "names.txt"],
    ["-j", "0", "names.txt"],
    ["--format", "xml", "names.txt"],
    [],
])
def test_invalid_arguments(argv):
    with pytest.raises(SystemExit) as excinfo:
        main(argv)

    assert excinfo.value.code == 2


def test_dump_alone_keeps_report_global(dictionary, names, tmp_path, capsys):
    code = main(["-l", "en_US", "-f", str(dictionary), "-d", "-o", str(tmp_path), str(names)])

    assert code == EXIT_OK
    out = capsys.readouterr().out
    assert "Total names processed: 5" in out
    assert "Per-street" not in out
    assert (tmp_path / "dump.streets.txt").read_text(encoding="utf-8").startswith("Main Street\n")
