import sys

from feasibility.driver import main

sys.exit(main())
