"""
Offline console demo: fills in the public appointment form from the terminal.

Drives the real page controller, booking form, availability resolver, and
state machine against the seeded in-memory backend. No network calls and
no API keys beyond a placeholder.

Usage:
    python console_demo.py
    python console_demo.py --scenario booking
    python console_demo.py --scenario retry
"""

import argparse
import asyncio
import dataclasses
from typing import Optional

from fieldservice.booking.form_state import FormState
from fieldservice.booking.public_form import FormClosedError
from fieldservice.config import settings
from fieldservice.pages.public_form_page import PageState, PublicFormPage
from fieldservice.services.memory_backend import InMemoryBackend
from fieldservice.services.seed import demo_resolver, demo_state

BLUE = "\033[94m"
GREEN = "\033[92m"
YELLOW = "\033[93m"
RED = "\033[91m"
DIM = "\033[2m"
RESET = "\033[0m"
BOLD = "\033[1m"

DEFAULT_CALENDAR_ID = "cal_tech1"

# (step, prompt) in the order the form asks for them
STEPS: list[tuple[str, str]] = [
    ("customer_name", "Full name"),
    ("customer_phone", "Phone (with country code)"),
    ("customer_email", "Email (optional, blank to skip)"),
    ("address", "Service address"),
    ("appliance_type", "Service type / subject"),
    ("issue_description", "Describe the problem or service"),
    ("date", "Preferred date YYYY-MM-DD (blank for no preference)"),
    ("slot", "Pick a time by number"),
    ("submit", "Send request? (yes/no)"),
]


class ConsoleSession:
    """Walks one visitor through the public form in the terminal."""

    SCENARIOS: dict[str, list[str]] = {
        "booking": [
            "Ana Pérez",
            "18095551234",
            "ana@example.com",
            "Av. Winston Churchill 1099",
            "Samsung washer",
            "Does not drain at the end of the cycle",
            "2024-06-10",
            "1",
            "yes",
        ],
        "no_preference": [
            "Pedro Santos",
            "18295550202",
            "",
            "Calle Sin Mapa 4",
            "Air conditioner",
            "Leaking water indoors",
            "",
            "yes",
        ],
        "retry": [
            "Luisa Martínez",
            "18495550303",
            "",
            "Calle Duarte 15, La Vega",
            "Refrigerator",
            "Not cooling",
            "2024-06-09",
            "yes",
            "yes",
        ],
    }

    MAX_INPUT_LENGTH = 500

    def __init__(self, calendar_id: str = DEFAULT_CALENDAR_ID) -> None:
        self.calendar_id = calendar_id
        self.backend = InMemoryBackend(demo_state())
        config = settings
        if not config.maps.api_key:
            config = dataclasses.replace(
                settings, maps=dataclasses.replace(settings.maps, api_key="console-demo")
            )
        self.page = PublicFormPage(self.backend, config=config, resolver=demo_resolver())
        self.step = 0

    def form_say(self, text: str) -> None:
        print(f"{GREEN}{BOLD}[Form]{RESET} {GREEN}{text}{RESET}")

    def system_log(self, text: str) -> None:
        print(f"{DIM}  >> {text}{RESET}")

    def prompt(self) -> str:
        return STEPS[self.step][1]

    async def start(self) -> bool:
        await self.page.load({"calendarId": self.calendar_id})
        print()
        print(f"{BOLD}{'=' * 60}{RESET}")
        print(f"{BOLD}  {self.page.title}{RESET}")
        if self.page.subtitle:
            print(f"{BOLD}  {self.page.subtitle}{RESET}")
        print(f"{BOLD}{'=' * 60}{RESET}")
        if self.page.state == PageState.ERROR:
            print(f"{RED}{self.page.error_message}{RESET}")
            return False
        self.form_say(self.prompt())
        return True

    def finish(self) -> None:
        form = self.page.form
        print(f"\n{BOLD}{'=' * 60}{RESET}")
        print(f"{BOLD}  Page state: {self.page.state.value}{RESET}")
        if form is not None:
            trace = " -> ".join(form.state_machine.get_state_trace())
            print(f"{DIM}  Form trace: {trace}{RESET}")
        state = self.backend.state
        if state is not None and state.service_orders:
            order = state.service_orders[-1]
            print(f"{DIM}  Last order: {order.service_order_number} {order.title} "
                  f"[{order.status.value}] start={order.start}{RESET}")
        print(f"{BOLD}{'=' * 60}{RESET}")

    async def run_scenario(self, scenario: str) -> None:
        """Auto-play a pre-scripted scenario for demo purposes."""
        steps = self.SCENARIOS.get(scenario)
        if not steps:
            print(f"{RED}Unknown scenario: {scenario}{RESET}")
            return
        if not await self.start():
            return
        if scenario == "retry":
            self.backend.fail_next_write("Simulated network failure")
            self.system_log("Backend will fail the next write")

        for step in steps:
            if self.page.state == PageState.SUCCESS or self.page.form.is_closed:
                break
            print(f"\n{BLUE}[Visitor] {RESET}{step}")
            await self._process_input(step)
        self.finish()

    async def run(self) -> None:
        if not await self.start():
            return
        while self.page.state != PageState.SUCCESS and not self.page.form.is_closed:
            user_input = input(f"\n{BLUE}[Visitor] {RESET}").strip()
            if user_input.lower() in ("quit", "exit", "q"):
                self.page.close()
                print(f"\n{DIM}Form closed, request discarded.{RESET}")
                break
            if len(user_input) > self.MAX_INPUT_LENGTH:
                self.form_say("That is too long, please keep it brief.")
                continue
            await self._process_input(user_input)
        self.finish()

    async def _process_input(self, text: str) -> None:
        form = self.page.form
        if form is None:
            return
        name = STEPS[self.step][0]
        try:
            if name in ("customer_name", "customer_phone", "customer_email",
                        "appliance_type", "issue_description"):
                form.update_fields(**{name: text})
                self._advance()
            elif name == "address":
                resolution = await form.resolve_address(text)
                if resolution is not None:
                    geo = "with map location" if resolution.has_geometry else "no map location"
                    self.system_log(f"Address resolved: {resolution.address} ({geo})")
                self._advance()
            elif name == "date":
                self._handle_date(text)
            elif name == "slot":
                self._handle_slot(text)
            elif name == "submit":
                await self._handle_submit(text)
                return
        except ValueError as e:
            self.form_say(str(e))
        except FormClosedError as e:
            self.form_say(str(e))
            return
        self.system_log(f"Form state: {form.state.value}")
        if self.page.state == PageState.FORM:
            self.form_say(self.prompt())

    def _advance(self, to: Optional[str] = None) -> None:
        if to is None:
            self.step += 1
        else:
            self.step = [s for s, _ in STEPS].index(to)

    def _handle_date(self, text: str) -> None:
        form = self.page.form
        slots = form.select_date(text)
        if not text:
            self._advance("submit")
            return
        if not slots:
            self.form_say(form.slot_message or "")
            self._advance("submit")
            return
        for i, slot in enumerate(slots, start=1):
            print(f"   {YELLOW}{i}.{RESET} {slot.label}")
        self._advance()

    def _handle_slot(self, text: str) -> None:
        form = self.page.form
        slots = form.available_slots
        try:
            choice = slots[int(text) - 1]
        except (ValueError, IndexError):
            raise ValueError(f"Please pick a number between 1 and {len(slots)}.") from None
        form.select_slot(choice)
        self.system_log(f"Slot chosen: {choice.label}")
        self._advance()

    async def _handle_submit(self, text: str) -> None:
        if text.lower() not in ("yes", "y"):
            self.page.close()
            self.form_say("Request discarded.")
            self.step = len(STEPS) - 1
            return
        self.system_log(self.page.loading_message)
        result = await self.page.submit()
        if result.success:
            self.form_say(result.message)
            return
        print(f"{RED}{result.message}{RESET}")
        self.page.dismiss_error()
        if self.page.form.state == FormState.EDITING and not result.missing_fields:
            self.form_say("Your details are still here. " + self.prompt())


def main() -> None:
    parser = argparse.ArgumentParser(description="Offline public form demo")
    parser.add_argument(
        "--scenario",
        choices=sorted(ConsoleSession.SCENARIOS),
        default=None,
        help="Auto-play a pre-scripted scenario instead of interactive mode",
    )
    parser.add_argument("--calendar-id", default=DEFAULT_CALENDAR_ID)
    args = parser.parse_args()

    session = ConsoleSession(args.calendar_id)
    if args.scenario:
        asyncio.run(session.run_scenario(args.scenario))
    else:
        asyncio.run(session.run())


if __name__ == "__main__":
    main()
