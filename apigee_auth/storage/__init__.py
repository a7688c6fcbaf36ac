"""Output artifacts written by the login flow."""
