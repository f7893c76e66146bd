"""
Field service booking entry point.

Runs the offline public form demo, or prints the share link and iframe
snippet an administrator pastes into another site.

Usage:
    Console mode: python main.py console
    Embed code:   python main.py embed cal_tech1
"""

import asyncio
import logging
import sys

from fieldservice.config import settings
from fieldservice.services.calendars import embed_code, embed_url, find_calendar
from fieldservice.services.memory_backend import InMemoryBackend
from fieldservice.services.seed import demo_state

logger = logging.getLogger(__name__)

USAGE = "Usage: python main.py console | python main.py embed <calendar_id>"


def _run_console_mode() -> None:
    """Start the offline console demo (no API keys required)."""
    from console_demo import ConsoleSession

    session = ConsoleSession()
    asyncio.run(session.run())


def _print_embed(calendar_id: str) -> int:
    """Print the public link and iframe snippet for one calendar."""
    backend = InMemoryBackend(demo_state())
    state = asyncio.run(backend.get_initial_state())
    calendar = find_calendar(state, calendar_id) if state else None
    if calendar is None:
        logger.error("Calendar %s not found", calendar_id)
        return 1
    if not calendar.active:
        logger.warning("Calendar %s is inactive; the form will show an error", calendar_id)

    print(f"Direct link ({settings.form.public_base_url}):")
    print(f"  {embed_url(calendar.id)}")
    print("Embed code:")
    print(f"  {embed_code(calendar)}")
    return 0


if __name__ == "__main__":
    if len(sys.argv) > 1 and sys.argv[1] == "console":
        _run_console_mode()
    elif len(sys.argv) > 2 and sys.argv[1] == "embed":
        sys.exit(_print_embed(sys.argv[2]))
    else:
        print(USAGE)
        sys.exit(2)
