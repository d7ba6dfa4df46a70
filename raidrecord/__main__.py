"""Entry point for running RaidRecord as a module: python -m raidrecord.

This enables:
    python -m raidrecord search "Name@Server"
    python -m raidrecord tiers
"""

from raidrecord.api.cli.main import main

if __name__ == "__main__":
    main()
