"""Allow running gash as ``python -m gash``."""

from .cli import main

if __name__ == "__main__":
    main()
