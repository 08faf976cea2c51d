import sys

from db_diff.cli import main

sys.exit(main())
