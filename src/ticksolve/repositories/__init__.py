"""Storage backends for tickets, students and login attempts."""
