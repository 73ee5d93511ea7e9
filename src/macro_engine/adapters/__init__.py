"""Host adapters for the macro engine."""
