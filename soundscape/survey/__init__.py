"""Survey submissions: intake (write path) and the submission browser (read path)."""
