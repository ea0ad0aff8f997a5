"""Infrastructure: database engine and concrete stores."""
