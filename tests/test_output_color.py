from spf_check.output import make_verdict_colorizer, resolve_color_enabled


class _FakeStream:
    def __init__(self, isatty: bool) -> None:
        self._isatty = isatty

    def isatty(self) -> bool:
        return self._isatty


def test_make_verdict_colorizer_enabled():
    colorize = make_verdict_colorizer(True)

    colored = colorize("pass")

    assert colored.startswith("\x1b[32m")
    assert colored.endswith("\x1b[0m")
    assert "pass" in colored
    assert colorize("Policy tree") == "Policy tree"


def test_make_verdict_colorizer_disabled():
    colorize = make_verdict_colorizer(False)

    assert colorize("fail") == "fail"


def test_resolve_color_enabled_no_color_overrides_always():
    stream = _FakeStream(isatty=True)
    env = {"NO_COLOR": "1", "TERM": "xterm-256color"}

    assert resolve_color_enabled("always", stream, env) is False


def test_resolve_color_enabled_auto_respects_tty_and_term():
    stream = _FakeStream(isatty=True)

    assert resolve_color_enabled("auto", stream, {"TERM": "xterm-256color"}) is True
    assert resolve_color_enabled("auto", stream, {"TERM": "dumb"}) is False
    assert resolve_color_enabled("auto", _FakeStream(isatty=False), {"TERM": "xterm-256color"}) is (
        False
    )


def test_resolve_color_enabled_never_and_always_modes():
    assert resolve_color_enabled("never", _FakeStream(isatty=True), {}) is False
    assert resolve_color_enabled("always", _FakeStream(isatty=False), {}) is True


def test_resolve_color_enabled_clicolor_zero_disables():
    stream = _FakeStream(isatty=True)

    assert resolve_color_enabled("auto", stream, {"TERM": "xterm-256color", "CLICOLOR": "0"}) is (
        False
    )


def test_resolve_color_enabled_force_color_flags():
    assert resolve_color_enabled("auto", _FakeStream(isatty=False), {"FORCE_COLOR": "1"}) is True
    assert resolve_color_enabled("auto", _FakeStream(isatty=False), {"FORCE_COLOR": ""}) is True
    assert resolve_color_enabled("auto", _FakeStream(isatty=True), {"FORCE_COLOR": "0"}) is False
    assert resolve_color_enabled("auto", _FakeStream(isatty=False), {"CLICOLOR_FORCE": "yes"}) is True


def test_resolve_color_enabled_handles_streams_without_isatty():
    assert resolve_color_enabled("auto", object(), {"TERM": "xterm"}) is False
