"""Template loading and rendering for output formats."""

from __future__ import annotations

from importlib import resources

from jinja2.sandbox import SandboxedEnvironment

_TEMPLATE_PACKAGE = "spf_check.resources.templates"

_ENV = SandboxedEnvironment(autoescape=False, trim_blocks=True, lstrip_blocks=True)


def _render_template(template_name: str, context: dict) -> str:
    """Render a packaged template with the provided context.

    Args:
        template_name (str): Template filename to render.
        context (dict): Render context.

    Returns:
        str: Rendered template output without trailing whitespace.
    """
    source = resources.files(_TEMPLATE_PACKAGE).joinpath(template_name).read_text(encoding="utf-8")
    return _ENV.from_string(source).render(**context).rstrip()
