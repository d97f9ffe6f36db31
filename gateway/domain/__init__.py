"""Pure domain rules (ids, merges, upload names, error taxonomy)."""
