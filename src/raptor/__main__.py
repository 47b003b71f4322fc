import sys

from raptor.cli import main

if __name__ == "__main__":
    sys.exit(main())
