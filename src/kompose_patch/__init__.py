"""Rewrite kompose output to serve config and credential files from ConfigMaps and Secrets."""
