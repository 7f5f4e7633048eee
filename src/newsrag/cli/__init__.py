"""newsrag command-line interface."""
