"""HTTP API for the Listkeeper example application."""
