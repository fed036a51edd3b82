"""Users, credentials, tokens and the authentication gate."""
