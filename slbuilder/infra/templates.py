"""Request body rendering.

Bodies are Jinja2 templates shipped with the package under
``slbuilder/templates``. Templates are addressed by their path relative to
the template directory, e.g. ``virtual_guest/createObject.json.j2``.
"""

from __future__ import annotations

import dataclasses
from collections.abc import Iterable, Mapping
from pathlib import Path
from typing import Any, Protocol, runtime_checkable

import jinja2
from loguru import logger

from slbuilder.core.exceptions import TemplateError

TEMPLATE_DIR = Path(__file__).resolve().parent.parent / "templates"


@runtime_checkable
class Renderer(Protocol):
    def render(self, template_id: str, data: Any) -> bytes: ...


def _context(data: Any) -> Mapping[str, Any]:
    if dataclasses.is_dataclass(data) and not isinstance(data, type):
        return dataclasses.asdict(data)
    if isinstance(data, Mapping):
        return data
    raise TypeError(f"Cannot render a template from {type(data).__name__}")


class TemplateRenderer:
    """Render request bodies from Jinja2 templates on disk."""

    def __init__(self, directory: Path | str | None = None) -> None:
        self._directory = Path(directory) if directory else TEMPLATE_DIR
        self._env = jinja2.Environment(
            loader=jinja2.FileSystemLoader(self._directory),
            undefined=jinja2.StrictUndefined,
            autoescape=False,
            keep_trailing_newline=True,
        )
        self._log = logger.bind(component="templates")

    def _load(self, template_id: str) -> jinja2.Template:
        try:
            return self._env.get_template(template_id)
        except jinja2.TemplateNotFound as e:
            raise TemplateError(template_id, f"not found in {self._directory}") from e
        except jinja2.TemplateSyntaxError as e:
            raise TemplateError(template_id, f"line {e.lineno}: {e.message}") from e

    def preload(self, template_ids: Iterable[str]) -> None:
        """Load every template up front so a broken install fails at startup."""
        for template_id in template_ids:
            self._load(template_id)

    def render(self, template_id: str, data: Any) -> bytes:
        template = self._load(template_id)
        context = _context(data)
        try:
            body = template.render(**context)
        except jinja2.UndefinedError as e:
            raise TemplateError(template_id, e.message or "undefined variable") from e
        except TypeError as e:
            # tojson on an undefined or unserializable value
            raise TemplateError(template_id, str(e)) from e

        self._log.debug("Generated request body {body}", body=body)
        return body.encode("utf-8")
