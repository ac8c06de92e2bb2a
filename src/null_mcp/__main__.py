import sys

from null_mcp.example import main

sys.exit(main())
