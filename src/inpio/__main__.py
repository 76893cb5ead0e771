import sys

from _inpio.debug import main

sys.exit(main())
