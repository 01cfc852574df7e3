import sys

from src.whitted.cli import main

sys.exit(main())
