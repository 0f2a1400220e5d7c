"""Command-line interface for fraiseql-introspect."""
