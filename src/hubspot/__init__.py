"""HubSpot CRM search collaborator (HTTP client and credentials)."""
