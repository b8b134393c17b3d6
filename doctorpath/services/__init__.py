"""Application services shared by the route layer."""
