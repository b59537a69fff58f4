"""Terminal front end: logging setup and the workflow run command."""
