import sys

from aurkeep.cli import main

sys.exit(main())
