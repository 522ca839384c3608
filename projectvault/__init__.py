"""Campus project vault - passcode authentication service."""
