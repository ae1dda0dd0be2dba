"""Events module generation.

Writes fetched event definitions to a Python module holding a single
``EVENTS`` constant. The module is meant to be committed and passed back
to ``PostHog(events=EVENTS)`` so queries are validated against it.
"""

from __future__ import annotations

import logging
import pprint
from collections.abc import Iterable
from pathlib import Path

from typecharts.types import EventDefinition

_logger = logging.getLogger(__name__)

DEFAULT_OUTPUT_FILENAME = "events.py"

_HEADER = '''\
"""PostHog event definitions.

This file is auto-generated by typecharts. While it's not recommended, you
are free to modify it however you may need. It is safe to commit to source
control and contains no secrets.
"""

from typing import Final

'''


def render_events_module(events: Iterable[EventDefinition]) -> str:
    """Render event definitions as Python module source.

    Duplicate event names keep the last definition.

    Args:
        events: Event definitions to include.

    Returns:
        Module source defining ``EVENTS: Final``.
    """
    event_map = {event.name: event.to_dict() for event in events}
    body = pprint.pformat(event_map, indent=4, width=88, sort_dicts=False)
    return f"{_HEADER}EVENTS: Final = {body}\n"


def generate_events_module(
    events: Iterable[EventDefinition],
    path: Path | None = None,
) -> Path:
    """Write event definitions to a Python module.

    Any existing file at the path is overwritten.

    Args:
        events: Event definitions to include.
        path: Output path. Default: events.py in the current directory.

    Returns:
        The path written.
    """
    target = path if path is not None else Path.cwd() / DEFAULT_OUTPUT_FILENAME
    source = render_events_module(events)
    target.write_text(source, encoding="utf-8")
    _logger.info("Wrote event definitions to %s", target)
    return target
