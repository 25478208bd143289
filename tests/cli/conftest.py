"""Shared fixtures for CLI tests."""

from __future__ import annotations

from collections.abc import Callable

import pytest

from spf_check import api

from tests.support import FakeResolver, scenario_resolver


@pytest.fixture
def cli_module():
    """Load the CLI module under test.

    Returns:
        module: Imported ``spf_check.cli`` module.
    """
    import spf_check.cli as cli

    return cli


@pytest.fixture(autouse=True)
def isolated_config(monkeypatch, tmp_path):
    """Keep user and system configuration files out of CLI runs.

    Returns:
        Path: Empty directory used as the only config search location.
    """
    import spf_check.config as config

    config_dir = tmp_path / "config"
    monkeypatch.setattr(config, "external_config_dirs", lambda: [config_dir])
    for name in ("NO_COLOR", "FORCE_COLOR", "CLICOLOR_FORCE", "CLICOLOR"):
        monkeypatch.delenv(name, raising=False)
    return config_dir


@pytest.fixture
def patch_resolver(monkeypatch, cli_module) -> Callable[[FakeResolver | None], list]:
    """Route CLI lookups to a fake resolver.

    Returns:
        Callable[[FakeResolver | None], list]: Installs a resolver and returns
        the list that records each ``get`` call's keyword arguments.
    """

    def _patch(resolver: FakeResolver | None = None) -> list:
        resolver = resolver or scenario_resolver()
        calls: list = []

        def _get(domain, configured=None, *, max_depth):
            calls.append({"domain": domain, "resolver": configured, "max_depth": max_depth})
            return api.get(domain, resolver, max_depth=max_depth)

        monkeypatch.setattr(cli_module, "get", _get)
        return calls

    return _patch
