"""Identity verification adapters."""
