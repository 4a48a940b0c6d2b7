"""Records of the students supervised at the institute, with their documents."""
