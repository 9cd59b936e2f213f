"""View and edit timeblocks and tasks kept as plain lines in Craft daily notes."""
