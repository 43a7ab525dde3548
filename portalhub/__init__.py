"""Portal Hub: social feed, project showcase and group chat backend."""
