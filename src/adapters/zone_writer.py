"""Zone file rendering.

Templates live in `adapters/templates` (Jinja2). Output is streamed chunk by
chunk into a temporary file next to the destination, which replaces the
destination only once fully written and closed.
"""

from __future__ import annotations

import logging
import os
import tempfile
from pathlib import Path
from typing import Iterable, Iterator

from jinja2 import Environment, FileSystemLoader, Template, TemplateError, select_autoescape

from adapters.sources.naming import discard
from core.domain.models import OutputFormat, RenderResult, RpzSoa
from core.errors import RenderError

logger = logging.getLogger(__name__)

_TEMPLATES_DIR = Path(__file__).resolve().parent / "templates"

_TEMPLATE_NAMES: dict[OutputFormat, str] = {
    OutputFormat.DNS: "zone_dns.j2",
    OutputFormat.RPZ: "zone_rpz.j2",
}


def _get_env() -> Environment:
    return Environment(
        loader=FileSystemLoader(str(_TEMPLATES_DIR)),
        autoescape=select_autoescape(["html", "xml"]),
        trim_blocks=True,
        keep_trailing_newline=True,
    )


def get_zone_template(output_format: OutputFormat) -> Template:
    return _get_env().get_template(_TEMPLATE_NAMES[OutputFormat(output_format)])


class _CountingIterator:
    def __init__(self, domains: Iterable[str]) -> None:
        self._domains = domains
        self.count = 0

    def __iter__(self) -> Iterator[str]:
        for domain in self._domains:
            self.count += 1
            yield domain


def _write_atomic(output_path: Path, chunks: Iterable[str]) -> None:
    tmp_path: Path | None = None
    try:
        output_path.parent.mkdir(parents=True, exist_ok=True)
        with tempfile.NamedTemporaryFile(
            "w",
            encoding="utf-8",
            newline="\n",
            dir=output_path.parent,
            prefix=f".{output_path.name}.",
            suffix=".tmp",
            delete=False,
        ) as fh:
            tmp_path = Path(fh.name)
            for chunk in chunks:
                fh.write(chunk)
            fh.flush()
            os.fsync(fh.fileno())
        os.chmod(tmp_path, 0o644)
        os.replace(tmp_path, output_path)
    except (OSError, TemplateError) as exc:
        if tmp_path is not None:
            discard(tmp_path)
        raise RenderError(f"Error writing to {output_path}: {exc}") from exc


def write_zone_file(
    *,
    domains: Iterable[str],
    output_path: Path,
    blocked_zone: str,
    output_format: OutputFormat,
    soa: RpzSoa | None = None,
) -> RenderResult:
    """Render `domains` as a dns or rpz zone file at `output_path`.

    Write failures never raise: they come back as `RenderResult(ok=False)`.
    """

    output_format = OutputFormat(output_format)
    soa = soa or RpzSoa()
    logger.info('Writing entries to %s as zone type "%s"', output_path, output_format.value)

    counter = _CountingIterator(domains)
    try:
        template = get_zone_template(output_format)
        chunks = template.generate(domains=counter, blocked_zone=blocked_zone, soa=soa)
        _write_atomic(output_path, chunks)
    except (RenderError, TemplateError) as exc:
        logger.error("%s", exc)
        return RenderResult(
            ok=False,
            path=output_path,
            output_format=output_format,
            error=str(exc),
        )

    logger.info("Saved file %s", output_path)
    return RenderResult(
        ok=True,
        path=output_path,
        output_format=output_format,
        entries_written=counter.count,
    )
