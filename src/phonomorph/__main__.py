"""Allow ``python -m phonomorph``."""

from phonomorph.main import main

if __name__ == "__main__":
    main()
