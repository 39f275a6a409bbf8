"""Business services for events, people, requests, workspaces and reports."""
