"""Main entry point for the Personal Work Suite dashboard."""
from cli import main

if __name__ == "__main__":
    main()
