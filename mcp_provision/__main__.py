"""Allow ``python -m mcp_provision``."""

from mcp_provision.main import main

if __name__ == "__main__":
    main()
