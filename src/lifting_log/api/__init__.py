"""HTTP API for the lifting log compiler."""
