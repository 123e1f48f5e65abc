"""
Entry point for running as: python -m v0_mcp
"""

from .main import main

if __name__ == "__main__":
    main()
