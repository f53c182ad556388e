"""Allow ``python -m daemonprobe``."""

from daemonprobe.cli import main

if __name__ == "__main__":
    main()
