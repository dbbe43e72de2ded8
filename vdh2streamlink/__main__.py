import sys

from vdh2streamlink.main import main

sys.exit(main())
