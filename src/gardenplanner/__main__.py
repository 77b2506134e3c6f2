"""Command-line interface."""
from gardenplanner.main import main

if __name__ == "__main__":
    main()
