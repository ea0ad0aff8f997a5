"""Domain records and repository protocols."""
