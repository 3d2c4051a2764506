"""Second Thought: reconsider online purchases before they happen."""
