"""HTTP routers for the JSON API and server-rendered pages."""
