"""hostpage - publish a host inventory page to Confluence."""
