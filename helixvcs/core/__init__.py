"""Repository data model: objects, commits, branches, index and remotes."""