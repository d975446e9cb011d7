"""Host adapters that map sessions onto UI toolkits."""
