"""Main entry point for the pool hours service."""

from .combined_server import main

if __name__ == "__main__":
    main()
