import sys

from viewbind.cli import main

sys.exit(main())
