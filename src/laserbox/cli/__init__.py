"""Command line interface for laserbox."""
