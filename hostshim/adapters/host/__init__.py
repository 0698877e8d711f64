"""Real host components registered in the service registry."""
