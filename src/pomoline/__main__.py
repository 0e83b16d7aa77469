"""Allow running as ``python -m pomoline``."""

from pomoline.cli.main import app

if __name__ == "__main__":
    app()
