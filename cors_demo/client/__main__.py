import sys

from cors_demo.client.cli import main

sys.exit(main())
