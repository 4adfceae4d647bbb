"""Command groups for slack-chat CLI."""
