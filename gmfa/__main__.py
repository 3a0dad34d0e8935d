import sys

from gmfa.core.otp_cli import main

sys.exit(main())
