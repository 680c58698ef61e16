import sys

from airwx.cli import main

sys.exit(main())
