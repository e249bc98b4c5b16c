import sys

from pyfi_bot.app import main

sys.exit(main())
