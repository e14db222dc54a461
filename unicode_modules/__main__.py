import sys

from .generate_unicode_modules import main

sys.exit(main())
