"""Allow `python -m id3tree`."""

from id3tree.cli import main

raise SystemExit(main())
