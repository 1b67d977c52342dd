"""Infrastructure: database engine and document repositories."""
