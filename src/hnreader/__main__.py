"""Allow running the server with ``python -m hnreader``."""

from hnreader.main import run

if __name__ == "__main__":
    run()
