import sys

from pixview.cli import main

sys.exit(main())
