"""Upload relay that stores files in a Telegram chat."""
