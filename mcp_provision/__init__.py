"""
mcp-provision — macOS provisioning for desktop AI integration servers.
"""

__version__ = "0.1.0"
