"""Main entry point: serve the mock ticketing backend."""

from ticketing_client.config import get_settings
from ticketing_client.mock_server import create_app
from ticketing_client.utils.logging_config import setup_logging


def main():
    """Main function for CLI entry point."""
    import uvicorn

    settings = get_settings()
    setup_logging()
    uvicorn.run(create_app(), host=settings.mock_server_host, port=settings.mock_server_port)


if __name__ == "__main__":
    main()
