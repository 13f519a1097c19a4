#!/usr/bin/env python3
"""Development scripts for the ticketing seat booking client."""

import asyncio
import subprocess
import sys


def start():
    """Start the mock backend with auto-reload."""
    subprocess.run([
        "uvicorn",
        "ticketing_client.mock_server:create_app",
        "--factory",
        "--host", "127.0.0.1",
        "--port", "8080",
        "--reload"
    ])


def lint():
    """Run linting and type checking."""
    subprocess.run(["black", "ticketing_client/", "tests/"])
    subprocess.run(["mypy", "ticketing_client/"])


def format_code():
    """Format code with black."""
    subprocess.run(["black", "ticketing_client/", "tests/"])


def test():
    """Run the test suite."""
    sys.exit(subprocess.run(["pytest", "tests/"]).returncode)


def demo():
    """Walk through one booking against the in-process mock backend."""
    import httpx

    from ticketing_client.api import TicketingApi
    from ticketing_client.mock_server import create_app
    from ticketing_client.seatmap import format_seat_map
    from ticketing_client.services import SeatSelectionService
    from ticketing_client.utils.logging_config import setup_logging

    async def run():
        setup_logging(log_level="WARNING")
        api = TicketingApi.create(base_url="http://mock", transport=httpx.ASGITransport(app=create_app()))
        try:
            service = SeatSelectionService(api)
            performance = await service.open_performance(1)
            await service.select_schedule(performance.schedules[0].schedule_id)
            for code in ("A::A-1", "A::A-2", "C::D-5"):
                print(f"{code}: {service.toggle_seat(code).value}")
            print(format_seat_map(service.render()))

            outcome = await service.book()
            if outcome.success:
                print(f"Booked {', '.join(outcome.seat_codes)} as {outcome.booking_number}")
            else:
                print(f"Booking failed: {outcome.error}")
            print(format_seat_map(service.render()))
        finally:
            await api.close()

    asyncio.run(run())


if __name__ == "__main__":
    if len(sys.argv) < 2:
        print("Usage: python scripts.py <command>")
        print("Commands: start, lint, format-code, test, demo")
        sys.exit(1)

    command = sys.argv[1].replace("-", "_")
    if hasattr(sys.modules[__name__], command):
        getattr(sys.modules[__name__], command)()
    else:
        print(f"Unknown command: {sys.argv[1]}")
        sys.exit(1)
