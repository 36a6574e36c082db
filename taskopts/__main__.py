"""Allow running the CLI with ``python -m taskopts``."""
from taskopts.cli import main

if __name__ == '__main__':
    main()
