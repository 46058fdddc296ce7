"""Use cases: one service per aggregate (auth, data rooms, folders, files)."""
