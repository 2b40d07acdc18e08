"""External collaborators: the identity provider and the data store."""
