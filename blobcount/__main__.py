# __main__.py
# python -m blobcount

import sys

from .cli import main

sys.exit(main())
