"""RaidRecord command line interface."""
