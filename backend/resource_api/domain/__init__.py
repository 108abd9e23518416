"""Domain types: query descriptors and errors."""
