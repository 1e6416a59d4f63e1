"""Streaming report assembly.

The report template carries placeholder tokens such as
``>TRACE_DATA_PLACEHOLDER<``. Each token is replaced by its delimiters
wrapped around the full payload, copied through chunk by chunk so that
neither the template nor any payload is ever held in memory whole.
"""

import os
import shutil
import tempfile
from contextlib import contextmanager
from dataclasses import dataclass
from importlib import resources
from pathlib import Path
from typing import Iterator, Mapping, TextIO, Union

from ..logging_config import get_logger

logger = get_logger(__name__)

CHUNK_SIZE = 64 * 1024

Payload = Union[str, Path, TextIO, None]


class ReportError(ValueError):
    """The report could not be assembled from the given template and payloads."""


@dataclass(frozen=True)
class Placeholder:
    """A named region of the template, written as ``open + name + close``."""

    name: str
    required: bool = False
    open: str = ">"
    close: str = "<"

    @property
    def token(self) -> str:
        return f"{self.open}{self.name}{self.close}"


TRACE = Placeholder("TRACE_DATA_PLACEHOLDER", required=True)
SAMPLE = Placeholder("SAMPLE_DATA_PLACEHOLDER")
STATE = Placeholder("STATE_DATA_PLACEHOLDER")
DEFAULT_PLACEHOLDERS = (TRACE, SAMPLE, STATE)


def _open_text(path: Path, mode: str) -> TextIO:
    # surrogateescape keeps arbitrary bytes intact through the copy
    return path.open(mode, encoding="utf-8", errors="surrogateescape", newline="")


@contextmanager
def _payload_source(payload: Payload) -> Iterator[TextIO | None]:
    if payload is None:
        yield None
    elif isinstance(payload, (str, Path)):
        path = Path(payload)
        if not path.is_file():
            yield None
        else:
            with _open_text(path, "r") as source:
                yield source
    else:
        # Caller-owned stream: read from it, never close it
        yield payload


class ReportAssembler:
    """Copies a template to an output stream, substituting placeholders."""

    def __init__(
        self,
        placeholders: tuple[Placeholder, ...] = DEFAULT_PLACEHOLDERS,
        chunk_size: int = CHUNK_SIZE,
    ):
        if not placeholders:
            raise ValueError("At least one placeholder is required")
        self._placeholders = {p.token: p for p in placeholders}
        self._chunk_size = chunk_size
        # Longest tail that could still be the start of a token
        self._carry = max(len(token) for token in self._placeholders) - 1

    def _find(self, buffer: str) -> tuple[int, Placeholder | None]:
        found: tuple[int, Placeholder | None] = (-1, None)
        for token, placeholder in self._placeholders.items():
            index = buffer.find(token)
            if index != -1 and (found[1] is None or index < found[0]):
                found = (index, placeholder)
        return found

    def _substitute(self, placeholder: Placeholder, payload: Payload, out: TextIO) -> None:
        with _payload_source(payload) as source:
            if source is None:
                if placeholder.required:
                    raise ReportError(f"No payload for required {placeholder.name}")
                logger.debug("Omitting %s: no payload", placeholder.name)
                return

            first = source.read(self._chunk_size)
            if not first and not placeholder.required:
                logger.debug("Omitting %s: empty payload", placeholder.name)
                return

            out.write(placeholder.open)
            out.write(first)
            shutil.copyfileobj(source, out, self._chunk_size)
            out.write(placeholder.close)

    def assemble(self, template: TextIO, out: TextIO, payloads: Mapping[str, Payload]) -> None:
        """Single forward pass over ``template``, writing the report to ``out``.

        ``payloads`` maps placeholder names to a path, an open text stream,
        or None. Optional placeholders with a missing or empty payload are
        dropped from the output entirely.
        """
        seen: set[str] = set()
        buffer = ""
        while True:
            chunk = template.read(self._chunk_size)
            buffer += chunk

            index, placeholder = self._find(buffer)
            while placeholder is not None:
                out.write(buffer[:index])
                buffer = buffer[index + len(placeholder.token):]
                seen.add(placeholder.name)
                self._substitute(placeholder, payloads.get(placeholder.name), out)
                index, placeholder = self._find(buffer)

            if not chunk:
                out.write(buffer)
                break

            if len(buffer) > self._carry:
                cut = len(buffer) - self._carry
                out.write(buffer[:cut])
                buffer = buffer[cut:]

        missing = [
            p.name for p in self._placeholders.values() if p.required and p.name not in seen
        ]
        if missing:
            raise ReportError(f"Template has no {', '.join(missing)} token")


def default_template() -> Path:
    """The bundled HTML viewer template."""
    return Path(str(resources.files("nanoscope.report") / "templates" / "index.html"))


def build_report(
    trace: Payload,
    sample: Payload = None,
    state: Payload = None,
    dest: str | Path | None = None,
    template: str | Path | None = None,
) -> Path:
    """Assemble the HTML report and return its path.

    Writes to ``dest``, or to a new temporary ``nanoscope*.html`` file.
    """
    if dest is None:
        fd, name = tempfile.mkstemp(prefix="nanoscope", suffix=".html")
        os.close(fd)
        dest = name
    dest = Path(dest)
    template_path = Path(template) if template is not None else default_template()

    logger.info("Building HTML report at %s", dest)
    payloads = {TRACE.name: trace, SAMPLE.name: sample, STATE.name: state}
    with _open_text(template_path, "r") as template_in, _open_text(dest, "w") as out:
        ReportAssembler().assemble(template_in, out, payloads)
    return dest
