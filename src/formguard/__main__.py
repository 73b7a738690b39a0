import sys

from formguard import main

sys.exit(main())
