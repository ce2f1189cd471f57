"""Topic planning, prompting, duplicate detection and publishing."""
