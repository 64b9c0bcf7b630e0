import sys

from tile_preview.cli import main

sys.exit(main())
