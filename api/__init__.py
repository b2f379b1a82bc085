"""HTTP surface for the agent registry client."""
