"""SAT practice test service."""
