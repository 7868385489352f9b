"""Authentication, rate limiting and CORS for the API."""
