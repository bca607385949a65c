"""Ticket sales conversion analytics tool - Entry point."""

from dotenv import load_dotenv

from ticket_analytics.cli import app

# Load environment variables from .env file
load_dotenv()

if __name__ == "__main__":
    app()
