import sys

from gads_mcp.mcp.server import main

if __name__ == "__main__":
    sys.exit(main())
