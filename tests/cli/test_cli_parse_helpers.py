import argparse

import pytest

from spf_check.cli.parsing import _parse_depth, _parse_positive_float


def test_parse_positive_float_accepts_numbers():
    assert _parse_positive_float("1.5", label="DNS timeout") == 1.5


@pytest.mark.parametrize(
    ("value", "message"),
    [("abc", "DNS timeout must be a number"), ("0", "DNS timeout must be greater than zero")],
)
def test_parse_positive_float_rejects_invalid(value, message):
    with pytest.raises(argparse.ArgumentTypeError, match=message):
        _parse_positive_float(value, label="DNS timeout")


def test_parse_depth_accepts_zero():
    assert _parse_depth("0") == 0


@pytest.mark.parametrize("value", ["-1", "two", "1.5"])
def test_parse_depth_rejects_invalid(value):
    with pytest.raises(argparse.ArgumentTypeError):
        _parse_depth(value)


def test_parser_rejects_missing_ip(capsys):
    from spf_check.cli import build_parser

    with pytest.raises(SystemExit) as exc:
        build_parser().parse_args(["example.org"])

    assert exc.value.code == 2
    assert "the following arguments are required: ip" in capsys.readouterr().err


def test_no_color_flag_sets_never():
    from spf_check.cli import build_parser

    args = build_parser().parse_args(["example.org", "192.0.2.1", "--no-color"])

    assert args.color == "never"
