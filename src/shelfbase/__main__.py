"""Entry point for 'python -m shelfbase' command."""

from shelfbase.cli import main

if __name__ == "__main__":
    main()
