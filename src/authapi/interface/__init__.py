"""HTTP interface for the authentication API."""
